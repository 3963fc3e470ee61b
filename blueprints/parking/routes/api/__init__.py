"""
Parking API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.parking.routes.api import availability
from blueprints.parking.routes.api import reservations
from blueprints.parking.routes.api import cessions
from blueprints.parking.routes.api import visitors
from blueprints.parking.routes.api import admin

# Register all route functions on the blueprint
availability.register_routes(api_bp)
reservations.register_routes(api_bp)
cessions.register_routes(api_bp)
visitors.register_routes(api_bp)
admin.register_routes(api_bp)
