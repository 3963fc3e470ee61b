"""
Parking blueprint initialization.
Assembles the JSON API for availability, reservations, cessions and
visitor bookings:
- routes/api/availability.py - Spot status, bookable spots, calendar
- routes/api/reservations.py - Employee reservations
- routes/api/cessions.py - Management cessions
- routes/api/visitors.py - Visitor bookings
- routes/api/admin.py - Maintenance endpoints
"""

from flask import Blueprint

# Create main parking blueprint
parking_bp = Blueprint('parking', __name__)

# =============================================================================
# REGISTER SUB-BLUEPRINTS
# =============================================================================

# API routes (all REST endpoints)
from blueprints.parking.routes.api import api_bp
parking_bp.register_blueprint(api_bp, url_prefix='/api')
