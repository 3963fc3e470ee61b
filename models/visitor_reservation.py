"""
Visitor booking guard.
Blocks a spot for one external guest on one day. Independent of the
reservation/cession cycle but exclusive with employee reservations.
"""

import logging
import sqlite3

from database import get_db
from utils.datetime_helpers import get_today, to_date, to_iso
from utils.errors import ConflictError, NotFoundError, ParkingError, PermissionDeniedError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)

VISITOR_FIELDS = ('visitor_name', 'visitor_company', 'visitor_email', 'notes')


# =============================================================================
# QUERIES
# =============================================================================

def get_visitor_booking_by_id(booking_id: int) -> dict:
    """
    Get visitor booking by ID.

    Args:
        booking_id: Visitor booking ID

    Returns:
        Visitor booking dict with spot_label, or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT v.*, s.label AS spot_label
        FROM visitor_reservations v
        JOIN spots s ON s.id = v.spot_id
        WHERE v.id = ?
    ''', (booking_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_upcoming_visitor_reservations(from_date=None) -> list:
    """Confirmed visitor bookings from today on, with spot label and creator name."""
    from_date = to_iso(from_date or get_today())

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT v.id, v.spot_id, v.date, v.visitor_name, v.visitor_company,
               v.visitor_email, v.notes, v.status, v.notification_sent,
               v.reserved_by, s.label AS spot_label,
               u.full_name AS reserved_by_name
        FROM visitor_reservations v
        JOIN spots s ON s.id = v.spot_id
        LEFT JOIN users u ON u.id = v.reserved_by
        WHERE v.status = 'confirmed' AND v.date >= ?
        ORDER BY v.date, s.label
    ''', (from_date,))
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# WRITE HELPERS
# =============================================================================

def _check_visitor_target(cursor, spot_id: int, day: str) -> None:
    """Raise unless the spot is active and has no employee reservation on day."""
    cursor.execute('SELECT id, is_active FROM spots WHERE id = ?', (spot_id,))
    spot = cursor.fetchone()
    if spot is None or not spot['is_active']:
        raise NotFoundError(MESSAGES['spot_not_found'])

    cursor.execute('''
        SELECT id FROM reservations
        WHERE spot_id = ? AND date = ? AND status = 'confirmed'
    ''', (spot_id, day))
    if cursor.fetchone():
        raise ConflictError(MESSAGES['spot_already_reserved'])


def _ensure_not_past(day: str) -> None:
    if to_date(day) < get_today():
        raise ParkingError(MESSAGES['past_date'])


# =============================================================================
# CREATE / UPDATE / CANCEL
# =============================================================================

def create_visitor_booking(identity, spot_id: int, day, visitor_name: str,
                           visitor_company: str, visitor_email: str,
                           notes: str = None) -> int:
    """
    Book a spot for an external visitor.

    Any authenticated user may book; there is no ownership check. The
    booking does not touch reservations or cessions.

    Args:
        identity: Authenticated User (becomes reserved_by)
        spot_id: Spot to block
        day: Date or ISO string
        visitor_name: Guest name
        visitor_company: Guest company
        visitor_email: Guest email
        notes: Optional free text

    Returns:
        int: New visitor booking ID

    Raises:
        ParkingError: Past date
        NotFoundError: Spot missing or inactive
        ConflictError: Spot already taken that day
    """
    day = to_iso(day)
    _ensure_not_past(day)

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')
        _check_visitor_target(cursor, spot_id, day)

        try:
            cursor.execute('''
                INSERT INTO visitor_reservations
                    (spot_id, reserved_by, date, visitor_name, visitor_company,
                     visitor_email, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (spot_id, identity.id, day, visitor_name.strip(),
                  visitor_company.strip(), visitor_email.strip(), notes or None))
        except sqlite3.IntegrityError:
            raise ConflictError(MESSAGES['visitor_spot_taken'])

        booking_id = cursor.lastrowid
        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(f"Visitor booking {booking_id} created by user {identity.id}: spot {spot_id}, {day}")
    return booking_id


def _get_own_booking(identity, booking_id: int) -> dict:
    booking = get_visitor_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError(MESSAGES['visitor_not_found'])
    if booking['reserved_by'] != identity.id:
        raise PermissionDeniedError(MESSAGES['not_visitor_owner'])
    return booking


def update_visitor_booking(identity, booking_id: int, **updates) -> dict:
    """
    Change spot, date or visitor details of a confirmed visitor booking.

    Only the creator may update. Moving the booking re-runs the same
    exclusivity checks as create.

    Args:
        identity: Authenticated User
        booking_id: Visitor booking ID
        **updates: Any of spot_id, date, visitor_name, visitor_company,
            visitor_email, notes

    Returns:
        dict: Updated visitor booking

    Raises:
        NotFoundError: Booking missing, cancelled, or target spot missing
        PermissionDeniedError: Caller is not the creator
        ConflictError: Target spot already taken that day
    """
    booking = _get_own_booking(identity, booking_id)
    if booking['status'] != 'confirmed':
        raise NotFoundError(MESSAGES['visitor_not_found'])

    spot_id = updates.get('spot_id') or booking['spot_id']
    day = to_iso(updates.get('date') or booking['date'])
    moved = spot_id != booking['spot_id'] or day != booking['date']
    if moved:
        _ensure_not_past(day)

    values = {field: booking[field] for field in VISITOR_FIELDS}
    for field in VISITOR_FIELDS:
        value = (updates.get(field) or '').strip()
        if value:
            values[field] = value

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')
        if moved:
            _check_visitor_target(cursor, spot_id, day)

        try:
            cursor.execute('''
                UPDATE visitor_reservations
                SET spot_id = ?, date = ?, visitor_name = ?, visitor_company = ?,
                    visitor_email = ?, notes = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ? AND status = 'confirmed'
            ''', (spot_id, day, values['visitor_name'], values['visitor_company'],
                  values['visitor_email'], values['notes'] or None, booking_id))
        except sqlite3.IntegrityError:
            raise ConflictError(MESSAGES['visitor_spot_taken'])

        if cursor.rowcount == 0:
            raise NotFoundError(MESSAGES['visitor_not_found'])

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(f"Visitor booking {booking_id} updated by user {identity.id}")
    return get_visitor_booking_by_id(booking_id)


def cancel_visitor_booking(identity, booking_id: int) -> dict:
    """
    Cancel a visitor booking. Creator only; idempotent.

    Returns:
        dict: {'cancelled': True, 'already_cancelled': bool}
    """
    booking = _get_own_booking(identity, booking_id)
    if booking['status'] == 'cancelled':
        return {'cancelled': True, 'already_cancelled': True}

    db = get_db()
    try:
        cursor = db.execute('''
            UPDATE visitor_reservations
            SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND reserved_by = ? AND status = 'confirmed'
        ''', (booking_id, identity.id))
        cancelled_now = cursor.rowcount > 0
        db.commit()
    except Exception:
        db.rollback()
        raise

    if cancelled_now:
        logger.info(f"Visitor booking {booking_id} cancelled by user {identity.id}")
    return {'cancelled': True, 'already_cancelled': not cancelled_now}
