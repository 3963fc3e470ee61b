"""
Reservation API routes.
Employees book and cancel single-day spot reservations.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.parking.actions import (
    cancel_reservation_action,
    create_reservation_action,
    my_reservations_action,
)
from utils.api_response import api_result
from utils.messages import MESSAGES


def register_routes(bp):
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def create_reservation():
        """
        Book a spot for the current user.

        Request body:
            spot_id: Spot ID
            date: Date (YYYY-MM-DD)
            notes: Optional text

        Returns:
            JSON with the new reservation id (201)
        """
        result = create_reservation_action(current_user, request.get_json(silent=True) or {})
        return api_result(result, status=201, message=MESSAGES['reservation_created'])

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    @login_required
    def cancel_reservation(reservation_id):
        """Cancel one of the current user's reservations."""
        result = cancel_reservation_action(current_user, {'reservation_id': reservation_id})
        return api_result(result, message=MESSAGES['reservation_cancelled'])

    @bp.route('/reservations/mine', methods=['GET'])
    @login_required
    def my_reservations():
        """Get the current user's upcoming reservations."""
        return api_result(my_reservations_action(current_user))
