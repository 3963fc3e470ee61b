"""
Employee reservation lifecycle.
Create and cancel single-day bookings, keeping management cessions in step.
"""

import logging
import sqlite3

from database import get_db
from models.cession_sync import sync_cession_for_reservation
from utils.datetime_helpers import get_today, to_date, to_iso
from utils.errors import ConflictError, NotFoundError, ParkingError, PermissionDeniedError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


# =============================================================================
# QUERIES
# =============================================================================

def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation by ID with its spot label and type.

    Args:
        reservation_id: Reservation ID

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT r.*, s.label AS spot_label, s.type AS spot_type
        FROM reservations r
        JOIN spots s ON s.id = r.spot_id
        WHERE r.id = ?
    ''', (reservation_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_reservations(user_id: int, from_date=None) -> list:
    """
    Get the user's upcoming confirmed reservations, ordered by date.

    Args:
        user_id: Holder user ID
        from_date: First date to include (default: today)

    Returns:
        list: Reservation dicts with spot_label
    """
    from_date = to_iso(from_date or get_today())

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT r.id, r.spot_id, r.date, r.status, r.notes, r.created_at,
               s.label AS spot_label, s.type AS spot_type
        FROM reservations r
        JOIN spots s ON s.id = r.spot_id
        WHERE r.user_id = ?
          AND r.status = 'confirmed'
          AND r.date >= ?
        ORDER BY r.date
    ''', (user_id, from_date))
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# CREATE
# =============================================================================

def _check_spot_bookable(cursor, spot: dict, day: str) -> None:
    """
    Raise if the spot cannot take an employee reservation on day.

    Visitor bookings block every lane; management spots additionally
    need a live 'available' cession.
    """
    cursor.execute('''
        SELECT id FROM visitor_reservations
        WHERE spot_id = ? AND date = ? AND status = 'confirmed'
    ''', (spot['id'], day))
    if cursor.fetchone():
        raise ConflictError(MESSAGES['spot_visitor_blocked'])

    if spot['type'] != 'management':
        return

    cursor.execute('''
        SELECT status FROM cessions
        WHERE spot_id = ? AND date = ? AND status <> 'cancelled'
    ''', (spot['id'], day))
    cession = cursor.fetchone()
    if cession is None:
        raise ConflictError(MESSAGES['spot_not_ceded'])
    if cession['status'] == 'reserved':
        raise ConflictError(MESSAGES['spot_already_reserved'])


def create_reservation(identity, spot_id: int, day, notes: str = None) -> int:
    """
    Book a spot for the caller on a single day.

    Checks, in order: the caller has no other confirmed reservation that
    day, the spot exists and can be booked, then inserts. Storage unique
    violations (lost races) are translated into the "already reserved"
    conflict. Booking a management spot flips its cession to 'reserved'
    on a best-effort basis.

    Args:
        identity: Authenticated User
        spot_id: Spot to book
        day: Date or ISO string
        notes: Optional free text

    Returns:
        int: New reservation ID

    Raises:
        ParkingError: Past date
        ConflictError: Caller or spot already booked that day
        NotFoundError: Spot missing or inactive
    """
    day = to_iso(day)
    if to_date(day) < get_today():
        raise ParkingError(MESSAGES['past_date'])

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('''
            SELECT id FROM reservations
            WHERE user_id = ? AND date = ? AND status = 'confirmed'
        ''', (identity.id, day))
        if cursor.fetchone():
            raise ConflictError(MESSAGES['already_reserved_that_day'])

        cursor.execute('SELECT * FROM spots WHERE id = ?', (spot_id,))
        spot = cursor.fetchone()
        if spot is None or not spot['is_active']:
            raise NotFoundError(MESSAGES['spot_not_found'])
        spot = dict(spot)

        _check_spot_bookable(cursor, spot, day)

        try:
            cursor.execute('''
                INSERT INTO reservations (spot_id, user_id, date, notes)
                VALUES (?, ?, ?, ?)
            ''', (spot_id, identity.id, day, notes or None))
        except sqlite3.IntegrityError:
            raise ConflictError(MESSAGES['spot_already_reserved'])

        reservation_id = cursor.lastrowid

        sync_cession_for_reservation(db, spot, day, 'available', 'reserved')

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(f"Reservation {reservation_id} created: user {identity.id}, spot {spot_id}, {day}")
    return reservation_id


# =============================================================================
# CANCEL
# =============================================================================

def cancel_reservation(identity, reservation_id: int) -> dict:
    """
    Cancel one of the caller's reservations.

    Idempotent: cancelling an already cancelled reservation is a no-op.
    For management spots the cession goes back to 'available' on a
    best-effort basis.

    Args:
        identity: Authenticated User
        reservation_id: Reservation ID

    Returns:
        dict: {'cancelled': True, 'already_cancelled': bool, 'cession_released': bool}

    Raises:
        NotFoundError: Reservation does not exist
        PermissionDeniedError: Caller is not the holder
    """
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise NotFoundError(MESSAGES['reservation_not_found'])
    if reservation['user_id'] != identity.id:
        raise PermissionDeniedError(MESSAGES['not_reservation_owner'])

    if reservation['status'] == 'cancelled':
        return {'cancelled': True, 'already_cancelled': True, 'cession_released': False}

    db = get_db()
    cursor = db.cursor()
    cession_released = False

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('''
            UPDATE reservations
            SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND user_id = ? AND status = 'confirmed'
        ''', (reservation_id, identity.id))
        cancelled_now = cursor.rowcount > 0

        if cancelled_now:
            spot = {'id': reservation['spot_id'], 'type': reservation['spot_type']}
            cession_released = sync_cession_for_reservation(
                db, spot, reservation['date'], 'reserved', 'available'
            )

        db.commit()

    except Exception:
        db.rollback()
        raise

    if cancelled_now:
        logger.info(f"Reservation {reservation_id} cancelled by user {identity.id}")

    return {
        'cancelled': True,
        'already_cancelled': not cancelled_now,
        'cession_released': cession_released,
    }
