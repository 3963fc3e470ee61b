"""
Cross-entity synchronization between reservations and cessions.

This is the only module allowed to touch rows the acting user does not
own: an employee's booking flips the manager's cession, and a manager's
cession cancel cancels the employee's reservation. Each capability is
deliberately narrow (one status transition for one spot+date).
"""

import logging
import sqlite3

from database import get_db
from utils.datetime_helpers import to_iso

logger = logging.getLogger(__name__)

# The only cession transitions a reservation change may drive
ALLOWED_FLIPS = {
    ('available', 'reserved'),
    ('reserved', 'available'),
}


# =============================================================================
# NARROW CAPABILITIES
# =============================================================================

def flip_cession_status(db, spot_id: int, day: str, from_status: str, to_status: str) -> int:
    """
    Flip the live cession of spot+day from one status to another.

    Conditional on the current status, so a repeated flip matches zero
    rows and is a no-op.

    Args:
        db: Connection with an open transaction
        spot_id: Spot ID
        day: ISO date
        from_status: Expected current status
        to_status: New status

    Returns:
        int: Rows updated (0 or 1)

    Raises:
        ValueError: If the transition is not allowed
    """
    if (from_status, to_status) not in ALLOWED_FLIPS:
        raise ValueError(f"Transición de cesión no permitida: {from_status} -> {to_status}")

    cursor = db.execute('''
        UPDATE cessions
        SET status = ?, updated_at = CURRENT_TIMESTAMP
        WHERE spot_id = ? AND date = ? AND status = ?
    ''', (to_status, spot_id, day, from_status))
    return cursor.rowcount


def cancel_dependent_reservation(db, reservation_id: int) -> int:
    """
    Cancel the reservation that depends on a cession being cancelled.

    Args:
        db: Connection
        reservation_id: Reservation ID

    Returns:
        int: Rows updated (0 if it was already cancelled)
    """
    cursor = db.execute('''
        UPDATE reservations
        SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP
        WHERE id = ? AND status = 'confirmed'
    ''', (reservation_id,))
    return cursor.rowcount


# =============================================================================
# BEST-EFFORT SYNC
# =============================================================================

def sync_cession_for_reservation(db, spot: dict, day: str, from_status: str, to_status: str) -> bool:
    """
    Follow a reservation change on a management spot with its cession flip.

    Runs inside the caller's transaction under a savepoint: the flip
    commits together with the reservation, and if it fails only the flip
    is rolled back. The failure is logged and never fails the reservation.

    Args:
        db: Connection with an open transaction
        spot: Spot dict of the reservation
        day: ISO date
        from_status: Expected cession status
        to_status: New cession status

    Returns:
        bool: True if a cession was flipped
    """
    if spot['type'] != 'management':
        return False

    db.execute('SAVEPOINT cession_sync')
    try:
        flipped = flip_cession_status(db, spot['id'], day, from_status, to_status)
    except sqlite3.Error:
        db.execute('ROLLBACK TO SAVEPOINT cession_sync')
        db.execute('RELEASE SAVEPOINT cession_sync')
        logger.warning(
            f"Cession flip {from_status}->{to_status} failed for spot {spot['id']} on {day}; "
            f"run 'flask reconcile-cessions' to repair",
            exc_info=True
        )
        return False
    db.execute('RELEASE SAVEPOINT cession_sync')

    if not flipped:
        logger.warning(
            f"No '{from_status}' cession found for spot {spot['id']} on {day} "
            f"while flipping to '{to_status}'"
        )
    return flipped > 0


# =============================================================================
# RECONCILIATION
# =============================================================================

def reconcile_cession_statuses(since=None) -> dict:
    """
    Re-derive live cession statuses from reservation existence.

    A cession is 'reserved' exactly when a confirmed reservation holds its
    spot+date; otherwise it is 'available'. Repairs drift left behind by a
    failed best-effort flip.

    Args:
        since: Only reconcile cessions on or after this date (default: all)

    Returns:
        dict: {'marked_reserved': int, 'marked_available': int}
    """
    db = get_db()
    date_filter = ''
    params = []
    if since is not None:
        date_filter = 'AND date >= ?'
        params.append(to_iso(since))

    reservation_exists = '''
        EXISTS (
            SELECT 1 FROM reservations r
            WHERE r.spot_id = cessions.spot_id
              AND r.date = cessions.date
              AND r.status = 'confirmed'
        )
    '''

    try:
        marked_reserved = db.execute(f'''
            UPDATE cessions
            SET status = 'reserved', updated_at = CURRENT_TIMESTAMP
            WHERE status = 'available' {date_filter}
              AND {reservation_exists}
        ''', params).rowcount

        marked_available = db.execute(f'''
            UPDATE cessions
            SET status = 'available', updated_at = CURRENT_TIMESTAMP
            WHERE status = 'reserved' {date_filter}
              AND NOT {reservation_exists}
        ''', params).rowcount

        db.commit()
    except Exception:
        db.rollback()
        raise

    if marked_reserved or marked_available:
        logger.warning(
            f"Cession reconciliation repaired drift: {marked_reserved} -> reserved, "
            f"{marked_available} -> available"
        )
    else:
        logger.info("Cession reconciliation: no drift found")

    return {'marked_reserved': marked_reserved, 'marked_available': marked_available}
