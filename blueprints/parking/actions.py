"""
Parking operations exposed to routes.
Each function validates its payload, checks the caller and returns a typed
result dict (see utils.actions); none of them raises.
"""

from blueprints.parking.forms import (
    CancelCessionForm,
    CancelReservationForm,
    CancelVisitorForm,
    CreateCessionForm,
    CreateReservationForm,
    CreateVisitorForm,
    DateQueryForm,
    MonthQueryForm,
    ReconcileForm,
    UpdateVisitorForm,
)
from models.availability import get_available_visitor_spots, get_spots_by_date, list_bookable_spots
from models.calendar import project_month
from models.cession import cancel_cession, create_cessions, get_user_cessions
from models.cession_sync import reconcile_cession_statuses
from models.reservation import cancel_reservation, create_reservation, get_user_reservations
from models.spot import get_assigned_management_spot
from models.visitor_reservation import (
    cancel_visitor_booking,
    create_visitor_booking,
    get_upcoming_visitor_reservations,
    update_visitor_booking,
)
from utils.actions import action
from utils.datetime_helpers import get_today, to_iso
from utils.errors import PermissionDeniedError
from utils.messages import MESSAGES


# =============================================================================
# AVAILABILITY
# =============================================================================

@action(DateQueryForm)
def bookable_spots_action(identity, date):
    return {'date': to_iso(date), 'spots': list_bookable_spots(date)}


@action(DateQueryForm)
def spots_by_date_action(identity, date):
    return {'date': to_iso(date), 'spots': get_spots_by_date(date)}


@action(DateQueryForm)
def visitor_spots_action(identity, date):
    return {'date': to_iso(date), 'spots': get_available_visitor_spots(date)}


@action(MonthQueryForm)
def calendar_action(identity, month):
    """Month calendar for the caller's role."""
    month_start = (month or get_today()).replace(day=1)
    result = {
        'month': month_start.strftime('%Y-%m'),
        'role': identity.role,
        'days': project_month(identity.role, identity, month_start),
    }
    if identity.is_management:
        spot = get_assigned_management_spot(identity.id)
        result['spot'] = {'id': spot['id'], 'label': spot['label']} if spot else None
    return result


# =============================================================================
# RESERVATIONS
# =============================================================================

@action(CreateReservationForm)
def create_reservation_action(identity, spot_id, date, notes):
    return {'id': create_reservation(identity, spot_id, date, notes)}


@action(CancelReservationForm)
def cancel_reservation_action(identity, reservation_id):
    return cancel_reservation(identity, reservation_id)


@action()
def my_reservations_action(identity):
    return get_user_reservations(identity.id)


# =============================================================================
# CESSIONS
# =============================================================================

@action(CreateCessionForm)
def create_cessions_action(identity, spot_id, dates):
    return {'count': create_cessions(identity, spot_id, dates)}


@action(CancelCessionForm)
def cancel_cession_action(identity, cession_id):
    return cancel_cession(identity, cession_id)


@action()
def my_cessions_action(identity):
    if not identity.is_management:
        raise PermissionDeniedError(MESSAGES['management_only'])
    return get_user_cessions(identity.id)


# =============================================================================
# VISITORS
# =============================================================================

@action(CreateVisitorForm)
def create_visitor_action(identity, spot_id, date, visitor_name, visitor_company,
                          visitor_email, notes):
    booking_id = create_visitor_booking(
        identity, spot_id, date,
        visitor_name=visitor_name,
        visitor_company=visitor_company,
        visitor_email=visitor_email,
        notes=notes
    )
    return {'id': booking_id}


@action(UpdateVisitorForm)
def update_visitor_action(identity, booking_id, **updates):
    return update_visitor_booking(identity, booking_id, **updates)


@action(CancelVisitorForm)
def cancel_visitor_action(identity, booking_id):
    return cancel_visitor_booking(identity, booking_id)


@action()
def upcoming_visitors_action(identity):
    return get_upcoming_visitor_reservations()


# =============================================================================
# MAINTENANCE
# =============================================================================

@action(ReconcileForm)
def reconcile_cessions_action(identity, since):
    if not identity.is_admin:
        raise PermissionDeniedError(MESSAGES['permission_denied'])
    return reconcile_cession_statuses(since)
