"""
Maintenance API routes.
Administrator-only repair endpoints.
"""

import logging
from flask import request
from flask_login import login_required, current_user

from blueprints.parking.actions import reconcile_cessions_action
from utils.api_response import api_result
from utils.decorators import role_required

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register maintenance routes on the blueprint."""

    @bp.route('/admin/reconcile-cessions', methods=['POST'])
    @login_required
    @role_required('admin')
    def reconcile_cessions():
        """
        Re-derive cession statuses from existing reservations.

        Request body:
            since: Optional date (YYYY-MM-DD); default reconciles everything

        Returns:
            JSON with marked_reserved and marked_available counts
        """
        logger.info(f"Cession reconciliation requested by user {current_user.id}")
        result = reconcile_cessions_action(current_user, request.get_json(silent=True) or {})
        return api_result(result)
