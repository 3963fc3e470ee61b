"""
Management cession lifecycle.
A manager releases their assigned spot on chosen days; other employees
can then book it. Cancelling a cession cascades to the reservation that
depends on it.
"""

import logging
import sqlite3

from database import get_db
from models.cession_sync import cancel_dependent_reservation
from models.spot import get_spot_by_id
from utils.datetime_helpers import get_today, to_date, to_iso
from utils.errors import (
    CascadeFailureError, ConflictError, NotFoundError, ParkingError, PermissionDeniedError
)
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


# =============================================================================
# QUERIES
# =============================================================================

def get_cession_by_id(cession_id: int) -> dict:
    """
    Get cession by ID.

    Args:
        cession_id: Cession ID

    Returns:
        Cession dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM cessions WHERE id = ?', (cession_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_cessions(user_id: int, from_date=None) -> list:
    """
    Get a manager's upcoming non-cancelled cessions, ordered by date.

    Args:
        user_id: Owner user ID
        from_date: First date to include (default: today)

    Returns:
        list: Cession dicts with spot_label and, when taken, the holder's name
    """
    from_date = to_iso(from_date or get_today())

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT c.id, c.spot_id, c.date, c.status, c.created_at,
               s.label AS spot_label,
               r.id AS reservation_id,
               u.full_name AS reserved_by_name
        FROM cessions c
        JOIN spots s ON s.id = c.spot_id
        LEFT JOIN reservations r
               ON r.spot_id = c.spot_id AND r.date = c.date AND r.status = 'confirmed'
        LEFT JOIN users u ON u.id = r.user_id
        WHERE c.user_id = ?
          AND c.status <> 'cancelled'
          AND c.date >= ?
        ORDER BY c.date
    ''', (user_id, from_date))
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# CREATE
# =============================================================================

def create_cessions(identity, spot_id: int, dates: list) -> int:
    """
    Cede the caller's own spot on one or more days.

    All-or-nothing: if any day already has a live cession the whole
    batch is rolled back.

    Args:
        identity: Authenticated User (management or admin)
        spot_id: The caller's assigned spot
        dates: Dates or ISO strings (duplicates are ignored)

    Returns:
        int: Number of cessions created

    Raises:
        PermissionDeniedError: Wrong role or not the spot owner
        NotFoundError: Spot does not exist
        ConflictError: A cession already exists for one of the days
    """
    if not identity.is_management:
        raise PermissionDeniedError(MESSAGES['management_only'])

    spot = get_spot_by_id(spot_id)
    if not spot:
        raise NotFoundError(MESSAGES['spot_not_found'])
    if spot['assigned_to'] != identity.id:
        raise PermissionDeniedError(MESSAGES['not_spot_owner'])

    days = sorted({to_iso(d) for d in dates or []})
    if not days:
        raise ParkingError(MESSAGES['select_one_day'])

    today = get_today()
    if any(to_date(d) < today for d in days):
        raise ParkingError(MESSAGES['past_date'])

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.executemany('''
            INSERT INTO cessions (spot_id, user_id, date)
            VALUES (?, ?, ?)
        ''', [(spot_id, identity.id, d) for d in days])
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise ConflictError(MESSAGES['cession_already_exists'])
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {identity.id} ceded spot {spot_id} on {len(days)} day(s): {', '.join(days)}")
    return len(days)


# =============================================================================
# CANCEL
# =============================================================================

def cancel_cession(identity, cession_id: int) -> dict:
    """
    Cancel a cession, cascading to the reservation that depends on it.

    A plain owner cannot evict an employee who already booked the spot;
    an administrator can, and the employee's reservation is cancelled too.
    The cession cancel commits first; if the cascade then fails a
    CascadeFailureError reports that manual follow-up is needed.

    Args:
        identity: Authenticated User (owner or admin)
        cession_id: Cession ID

    Returns:
        dict: {'cancelled': True, 'already_cancelled': bool,
               'reservation_also_cancelled': bool}

    Raises:
        NotFoundError: Cession does not exist
        PermissionDeniedError: Caller is neither the owner nor an admin
        ConflictError: Someone booked the spot and the caller is not an admin
        CascadeFailureError: Cession cancelled but its reservation was not
    """
    cession = get_cession_by_id(cession_id)
    if not cession:
        raise NotFoundError(MESSAGES['cession_not_found'])
    if cession['user_id'] != identity.id and not identity.is_admin:
        raise PermissionDeniedError(MESSAGES['not_cession_owner'])

    if cession['status'] == 'cancelled':
        return {'cancelled': True, 'already_cancelled': True, 'reservation_also_cancelled': False}

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        # Status and booking are re-read under the write lock
        cursor.execute('SELECT status FROM cessions WHERE id = ?', (cession_id,))
        current_status = cursor.fetchone()['status']

        cursor.execute('''
            SELECT id, user_id FROM reservations
            WHERE spot_id = ? AND date = ? AND status = 'confirmed'
        ''', (cession['spot_id'], cession['date']))
        active_reservation = cursor.fetchone()

        if active_reservation and current_status == 'reserved' and not identity.is_admin:
            raise ConflictError(MESSAGES['cession_already_booked'])

        cursor.execute('''
            UPDATE cessions
            SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND status = ? AND status <> 'cancelled'
        ''', (cession_id, current_status))
        cancelled_now = cursor.rowcount > 0
        db.commit()
    except Exception:
        db.rollback()
        raise

    if not cancelled_now:
        return {'cancelled': True, 'already_cancelled': True, 'reservation_also_cancelled': False}

    logger.info(f"Cession {cession_id} cancelled by user {identity.id}")

    reservation_also_cancelled = False
    if active_reservation:
        try:
            reservation_also_cancelled = cancel_dependent_reservation(db, active_reservation['id']) > 0
            db.commit()
        except sqlite3.Error:
            db.rollback()
            logger.exception(
                f"Cession {cession_id} cancelled but reservation {active_reservation['id']} "
                f"(user {active_reservation['user_id']}) could not be cancelled"
            )
            raise CascadeFailureError(
                MESSAGES['cession_cascade_failed'].format(reservation_id=active_reservation['id'])
            )

        if reservation_also_cancelled:
            logger.info(
                f"Reservation {active_reservation['id']} of user {active_reservation['user_id']} "
                f"cancelled by cession {cession_id} cancel"
            )

    return {
        'cancelled': True,
        'already_cancelled': False,
        'reservation_also_cancelled': reservation_also_cancelled,
    }
