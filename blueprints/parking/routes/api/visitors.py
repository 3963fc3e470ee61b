"""
Visitor booking API routes.
Any employee can block a spot for an external guest.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.parking.actions import (
    cancel_visitor_action,
    create_visitor_action,
    update_visitor_action,
    upcoming_visitors_action,
)
from utils.api_response import api_result
from utils.messages import MESSAGES


def register_routes(bp):
    """Register visitor booking routes on the blueprint."""

    @bp.route('/visitors', methods=['GET'])
    @login_required
    def list_visitors():
        """Get upcoming confirmed visitor bookings."""
        return api_result(upcoming_visitors_action(current_user))

    @bp.route('/visitors', methods=['POST'])
    @login_required
    def create_visitor():
        """
        Book a spot for a visitor.

        Request body:
            spot_id: Spot ID
            date: Date (YYYY-MM-DD)
            visitor_name: Guest name
            visitor_company: Guest company
            visitor_email: Guest email
            notes: Optional text

        Returns:
            JSON with the new booking id (201)
        """
        result = create_visitor_action(current_user, request.get_json(silent=True) or {})
        return api_result(result, status=201, message=MESSAGES['visitor_created'])

    @bp.route('/visitors/<int:booking_id>', methods=['PUT'])
    @login_required
    def update_visitor(booking_id):
        """Change spot, date or guest details of a visitor booking."""
        payload = request.get_json(silent=True) or {}
        if isinstance(payload, dict):
            payload = {**payload, 'booking_id': booking_id}
        result = update_visitor_action(current_user, payload)
        return api_result(result, message=MESSAGES['visitor_updated'])

    @bp.route('/visitors/<int:booking_id>/cancel', methods=['POST'])
    @login_required
    def cancel_visitor(booking_id):
        """Cancel a visitor booking (creator only)."""
        result = cancel_visitor_action(current_user, {'booking_id': booking_id})
        return api_result(result, message=MESSAGES['visitor_cancelled'])
