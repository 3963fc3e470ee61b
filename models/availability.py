"""
Spot/day availability projection.
Pure read path: decides, for one date, which spots are bookable and what
state every spot is in. Used by the booking picker and the parking map.
"""

import logging
import sqlite3

from database import get_db
from utils.datetime_helpers import to_iso
from utils.errors import DataAccessError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


# =============================================================================
# DAY SNAPSHOT
# =============================================================================

def _load_day_snapshot(day: str) -> dict:
    """
    Load every row that decides spot state on a date.

    Returns:
        dict: {
            'spots': [spot dicts ordered by label],
            'reservations': {spot_id: reservation row},
            'cessions': {spot_id: cession row},
            'visitors': {spot_id: visitor row}
        }

    Raises:
        DataAccessError: If any read fails (never returns partial data)
    """
    try:
        db = get_db()
        cursor = db.cursor()

        cursor.execute('''
            SELECT id, label, type, assigned_to, position_x, position_y
            FROM spots
            WHERE is_active = 1
            ORDER BY label
        ''')
        spots = [dict(row) for row in cursor.fetchall()]

        cursor.execute('''
            SELECT r.id, r.spot_id, r.user_id, u.full_name AS holder_name
            FROM reservations r
            LEFT JOIN users u ON u.id = r.user_id
            WHERE r.date = ? AND r.status = 'confirmed'
        ''', (day,))
        reservations = {row['spot_id']: dict(row) for row in cursor.fetchall()}

        cursor.execute('''
            SELECT id, spot_id, user_id, status
            FROM cessions
            WHERE date = ? AND status <> 'cancelled'
        ''', (day,))
        cessions = {row['spot_id']: dict(row) for row in cursor.fetchall()}

        cursor.execute('''
            SELECT id, spot_id, visitor_name
            FROM visitor_reservations
            WHERE date = ? AND status = 'confirmed'
        ''', (day,))
        visitors = {row['spot_id']: dict(row) for row in cursor.fetchall()}

    except sqlite3.Error:
        logger.exception(f"Error loading spot availability for {day}")
        raise DataAccessError(MESSAGES['data_access_error'])

    return {
        'spots': spots,
        'reservations': reservations,
        'cessions': cessions,
        'visitors': visitors,
    }


def _spot_entry(spot: dict, status: str, **extra) -> dict:
    entry = {
        'id': spot['id'],
        'label': spot['label'],
        'type': spot['type'],
        'assigned_to': spot['assigned_to'],
        'status': status,
    }
    entry.update(extra)
    return entry


# =============================================================================
# BOOKABLE SPOTS
# =============================================================================

def list_bookable_spots(day) -> list:
    """
    List the spots an employee can book on a date.

    A spot is bookable when nothing claims it that day (no confirmed
    reservation, no confirmed visitor booking). Management spots are only
    bookable while their owner's cession for that day is 'available'.

    Args:
        day: Date or ISO string

    Returns:
        list: Spot dicts ordered by label, each with status 'free' or 'ceded'

    Raises:
        DataAccessError: If storage cannot be read
    """
    day = to_iso(day)
    snapshot = _load_day_snapshot(day)

    bookable = []
    for spot in snapshot['spots']:
        if spot['id'] in snapshot['reservations'] or spot['id'] in snapshot['visitors']:
            continue

        if spot['type'] == 'management':
            cession = snapshot['cessions'].get(spot['id'])
            if not cession or cession['status'] != 'available':
                continue
            bookable.append(_spot_entry(spot, 'ceded', cession_id=cession['id']))
        else:
            bookable.append(_spot_entry(spot, 'free'))

    return bookable


# =============================================================================
# MAP STATUS
# =============================================================================

def get_spots_by_date(day) -> list:
    """
    Get every active spot with its computed state for a date.

    Status rules (first match wins):
    - confirmed visitor booking        -> 'visitor-blocked'
    - confirmed reservation            -> 'reserved'
    - management spot without cession  -> 'occupied' (held by its owner)
    - management spot, cession reserved -> 'reserved'
    - management spot, cession available -> 'ceded'
    - otherwise                        -> 'free'

    Args:
        day: Date or ISO string

    Returns:
        list: Spot dicts with 'status', 'reservation_id' and 'reserved_by_name'
    """
    day = to_iso(day)
    snapshot = _load_day_snapshot(day)

    result = []
    for spot in snapshot['spots']:
        visitor = snapshot['visitors'].get(spot['id'])
        reservation = snapshot['reservations'].get(spot['id'])
        cession = snapshot['cessions'].get(spot['id'])

        if visitor:
            entry = _spot_entry(spot, 'visitor-blocked',
                                reservation_id=visitor['id'],
                                reserved_by_name=visitor['visitor_name'])
        elif reservation:
            entry = _spot_entry(spot, 'reserved',
                                reservation_id=reservation['id'],
                                reserved_by_name=reservation['holder_name'])
        elif spot['type'] == 'management':
            if not cession:
                entry = _spot_entry(spot, 'occupied')
            elif cession['status'] == 'reserved':
                # Reserved cession without a reservation row is drift; show it as taken
                entry = _spot_entry(spot, 'reserved', cession_id=cession['id'])
            else:
                entry = _spot_entry(spot, 'ceded', cession_id=cession['id'])
        else:
            entry = _spot_entry(spot, 'free')

        result.append(entry)

    return result


def get_available_visitor_spots(day) -> list:
    """
    Get active visitor-type spots still free on a date.
    Used by the visitor booking picker.

    Args:
        day: Date or ISO string

    Returns:
        list: [{'id', 'label'}] ordered by label
    """
    day = to_iso(day)
    snapshot = _load_day_snapshot(day)

    return [
        {'id': spot['id'], 'label': spot['label']}
        for spot in snapshot['spots']
        if spot['type'] == 'visitor'
        and spot['id'] not in snapshot['visitors']
        and spot['id'] not in snapshot['reservations']
    ]
