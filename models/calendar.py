"""
Month calendar projection.
Per-day status for a whole month, specialized for the two kinds of caller:
employees looking for a spot and managers ceding their own.
"""

from flask import current_app

from database import get_db
from models.spot import POOL_SPOT_TYPES, get_assigned_management_spot
from models.user import MANAGEMENT_ROLES
from utils.datetime_helpers import get_today, is_weekend, iter_month_days, month_bounds
from utils.messages import DAY_STATUS_LABELS


def _classify_calendar_day(day, today):
    """Shared first pass: 'weekend', 'past' or None for a bookable day."""
    if is_weekend(day):
        return 'weekend'
    if day < today:
        return 'past'
    return None


# =============================================================================
# EMPLOYEE
# =============================================================================

def _pool_counts(first_day: str, last_day: str) -> tuple:
    """
    Count, per date in range, reserved pool spots and available cessions.

    Returns:
        tuple: (pool_size, {date: reserved_pool}, {date: available_cessions})
    """
    db = get_db()
    cursor = db.cursor()
    placeholders = ','.join('?' * len(POOL_SPOT_TYPES))

    cursor.execute(f'''
        SELECT COUNT(*) FROM spots
        WHERE is_active = 1 AND type IN ({placeholders})
    ''', POOL_SPOT_TYPES)
    pool_size = cursor.fetchone()[0]

    cursor.execute(f'''
        SELECT r.date, COUNT(*) AS n
        FROM reservations r
        JOIN spots s ON s.id = r.spot_id
        WHERE r.status = 'confirmed'
          AND r.date BETWEEN ? AND ?
          AND s.is_active = 1
          AND s.type IN ({placeholders})
        GROUP BY r.date
    ''', (first_day, last_day, *POOL_SPOT_TYPES))
    reserved = {row['date']: row['n'] for row in cursor.fetchall()}

    cursor.execute('''
        SELECT c.date, COUNT(*) AS n
        FROM cessions c
        JOIN spots s ON s.id = c.spot_id
        WHERE c.status = 'available'
          AND c.date BETWEEN ? AND ?
          AND s.is_active = 1
        GROUP BY c.date
    ''', (first_day, last_day))
    ceded = {row['date']: row['n'] for row in cursor.fetchall()}

    return pool_size, reserved, ceded


def project_employee_month(identity, month_start) -> list:
    """
    Employee calendar: how easy it is to find a spot each day.

    Days are 'weekend', 'past', 'reserved' (the caller already has a
    booking), or by available count 'none', 'few' (up to
    FEW_SPOTS_THRESHOLD) and 'plenty'.

    Args:
        identity: Authenticated User
        month_start: Any date in the target month

    Returns:
        list: [{'date', 'status', 'available_count', 'reservation_id'}]
    """
    first_day, last_day = month_bounds(month_start)
    first_iso, last_iso = first_day.isoformat(), last_day.isoformat()
    threshold = current_app.config.get('FEW_SPOTS_THRESHOLD', 3)
    today = get_today()

    pool_size, reserved, ceded = _pool_counts(first_iso, last_iso)

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT id, date FROM reservations
        WHERE user_id = ? AND status = 'confirmed' AND date BETWEEN ? AND ?
    ''', (identity.id, first_iso, last_iso))
    mine = {row['date']: row['id'] for row in cursor.fetchall()}

    days = []
    for day in iter_month_days(month_start):
        iso = day.isoformat()
        available = max(pool_size - reserved.get(iso, 0), 0) + ceded.get(iso, 0)

        status = _classify_calendar_day(day, today)
        if status is None:
            if iso in mine:
                status = 'reserved'
            elif available == 0:
                status = 'none'
            elif available <= threshold:
                status = 'few'
            else:
                status = 'plenty'

        days.append({
            'date': iso,
            'status': status,
            'label': DAY_STATUS_LABELS[status],
            'available_count': available,
            'reservation_id': mine.get(iso),
        })

    return days


# =============================================================================
# MANAGEMENT
# =============================================================================

def project_management_month(identity, month_start) -> list:
    """
    Manager calendar: the state of the caller's own spot each day.

    Days are 'weekend', 'past', 'in-use' (no assigned spot, or a cession
    in an unexpected state), 'can-cede', 'ceded-free' or 'ceded-taken'.

    Args:
        identity: Authenticated User with a management role
        month_start: Any date in the target month

    Returns:
        list: [{'date', 'status', 'cession_id', 'cession_status', 'reservation_id'}]
    """
    first_day, last_day = month_bounds(month_start)
    first_iso, last_iso = first_day.isoformat(), last_day.isoformat()
    today = get_today()

    spot = get_assigned_management_spot(identity.id)
    cessions = {}
    reservations = {}

    if spot:
        db = get_db()
        cursor = db.cursor()
        cursor.execute('''
            SELECT id, date, status FROM cessions
            WHERE spot_id = ? AND status <> 'cancelled' AND date BETWEEN ? AND ?
        ''', (spot['id'], first_iso, last_iso))
        cessions = {row['date']: dict(row) for row in cursor.fetchall()}

        cursor.execute('''
            SELECT id, date FROM reservations
            WHERE spot_id = ? AND status = 'confirmed' AND date BETWEEN ? AND ?
        ''', (spot['id'], first_iso, last_iso))
        reservations = {row['date']: row['id'] for row in cursor.fetchall()}

    days = []
    for day in iter_month_days(month_start):
        iso = day.isoformat()
        cession = cessions.get(iso)

        status = _classify_calendar_day(day, today)
        if status is None:
            if not spot:
                status = 'in-use'
            elif cession is None:
                status = 'can-cede'
            elif cession['status'] == 'available':
                status = 'ceded-free'
            elif cession['status'] == 'reserved':
                status = 'ceded-taken'
            else:
                status = 'in-use'

        days.append({
            'date': iso,
            'status': status,
            'label': DAY_STATUS_LABELS[status],
            'cession_id': cession['id'] if cession else None,
            'cession_status': cession['status'] if cession else None,
            'reservation_id': reservations.get(iso),
        })

    return days


def project_month(role: str, identity, month_start) -> list:
    """
    Month projection for the caller's role.

    Args:
        role: 'employee', 'management' or 'admin'
        identity: Authenticated User
        month_start: Any date in the target month

    Returns:
        list: One dict per calendar day
    """
    if role in MANAGEMENT_ROLES:
        return project_management_month(identity, month_start)
    return project_employee_month(identity, month_start)
