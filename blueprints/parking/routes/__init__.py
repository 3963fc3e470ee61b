"""Parking route modules."""
