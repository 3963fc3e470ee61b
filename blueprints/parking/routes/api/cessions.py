"""
Cession API routes.
Managers release their assigned spot on chosen days.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.parking.actions import (
    cancel_cession_action,
    create_cessions_action,
    my_cessions_action,
)
from utils.api_response import api_result
from utils.messages import MESSAGES


def register_routes(bp):
    """Register cession routes on the blueprint."""

    @bp.route('/cessions', methods=['POST'])
    @login_required
    def create_cessions():
        """
        Cede the current user's spot on one or more days.

        Request body:
            spot_id: The user's assigned spot
            dates: List of dates (YYYY-MM-DD)

        Returns:
            JSON with the number of cessions created (201)
        """
        result = create_cessions_action(current_user, request.get_json(silent=True) or {})
        message = None
        if result['success']:
            message = MESSAGES['cessions_created'].format(count=result['data']['count'])
        return api_result(result, status=201, message=message)

    @bp.route('/cessions/<int:cession_id>/cancel', methods=['POST'])
    @login_required
    def cancel_cession(cession_id):
        """
        Cancel a cession.

        An administrator cancelling a booked cession also cancels the
        employee's reservation; the response reports it.
        """
        result = cancel_cession_action(current_user, {'cession_id': cession_id})
        message = MESSAGES['cession_cancelled']
        if result['success'] and result['data']['reservation_also_cancelled']:
            message = MESSAGES['cession_and_reservation_cancelled']
        return api_result(result, message=message)

    @bp.route('/cessions/mine', methods=['GET'])
    @login_required
    def my_cessions():
        """Get the current manager's upcoming cessions."""
        return api_result(my_cessions_action(current_user))
