"""
API routes for JSON endpoints.
Service-level endpoints outside the parking blueprint.
"""

from flask import jsonify, Blueprint, current_app

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'Parking Corporativo')
    })
