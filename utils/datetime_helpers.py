"""Timezone-aware date/time helpers for the parking application."""

import calendar
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Europe/Madrid')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone (server clock, never the client's)."""
    return datetime.now(get_timezone()).date()


def to_date(value) -> date:
    """
    Coerce a date or ISO string (YYYY-MM-DD) to a date.

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def to_iso(value) -> str:
    """Normalize a date or ISO string to the YYYY-MM-DD storage format."""
    return to_date(value).isoformat()


def is_weekend(day: date) -> bool:
    """Saturday or Sunday."""
    return day.weekday() >= 5


def month_bounds(month_start) -> tuple:
    """
    First and last day of the month containing month_start.

    Returns:
        tuple: (first_day: date, last_day: date)
    """
    day = to_date(month_start)
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def iter_month_days(month_start):
    """Yield every date of the month containing month_start."""
    first_day, last_day = month_bounds(month_start)
    current = first_day
    while current <= last_day:
        yield current
        current += timedelta(days=1)
