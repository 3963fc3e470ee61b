"""
Availability API routes.
Spot state for a day, the booking picker and the month calendar.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.parking.actions import (
    bookable_spots_action,
    calendar_action,
    spots_by_date_action,
    visitor_spots_action,
)
from utils.api_response import api_result


def register_routes(bp):
    """Register availability routes on the blueprint."""

    @bp.route('/spots', methods=['GET'])
    @login_required
    def spots_by_date():
        """
        Get every active spot with its state for a date (parking map).

        Query params:
            date: Date (YYYY-MM-DD)

        Returns:
            JSON with date and spots
        """
        return api_result(spots_by_date_action(current_user, request.args.to_dict()))

    @bp.route('/spots/bookable', methods=['GET'])
    @login_required
    def bookable_spots():
        """
        Get spots an employee can book on a date.

        Query params:
            date: Date (YYYY-MM-DD)
        """
        return api_result(bookable_spots_action(current_user, request.args.to_dict()))

    @bp.route('/spots/visitor', methods=['GET'])
    @login_required
    def visitor_spots():
        """Get visitor spots still free on a date."""
        return api_result(visitor_spots_action(current_user, request.args.to_dict()))

    @bp.route('/calendar', methods=['GET'])
    @login_required
    def calendar():
        """
        Get the month calendar for the current user's role.

        Query params:
            month: Month (YYYY-MM), defaults to the current month

        Returns:
            JSON with month, role and one entry per day
        """
        return api_result(calendar_action(current_user, request.args.to_dict()))
