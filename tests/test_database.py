"""
Database tests.
Tests schema initialization, seed data and uniqueness guarantees.
"""

import sqlite3
import pytest

from conftest import add_cession, add_reservation, add_spot


def test_database_tables(app):
    """Test that all required tables exist."""
    from database import get_db

    cursor = get_db().cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = [row[0] for row in cursor.fetchall()]

    for table in ['users', 'spots', 'reservations', 'cessions', 'visitor_reservations']:
        assert table in tables, f"Table {table} should exist"


def test_seed_data(app):
    """Test that seed data was created correctly."""
    from database import get_db

    cursor = get_db().cursor()

    cursor.execute("SELECT role FROM users WHERE username='admin'")
    assert cursor.fetchone()['role'] == 'admin'

    cursor.execute("SELECT type, COUNT(*) AS n FROM spots GROUP BY type")
    counts = {row['type']: row['n'] for row in cursor.fetchall()}
    assert counts == {'standard': 8, 'disabled': 1, 'visitor': 2, 'management': 2}


class TestUniqueIndexes:
    """Storage-level uniqueness among live rows."""

    def test_one_confirmed_reservation_per_spot(self, app, users, workday):
        spot_id = add_spot('S-1')
        add_reservation(spot_id, users['ana'].id, workday)

        with pytest.raises(sqlite3.IntegrityError):
            add_reservation(spot_id, users['bruno'].id, workday)

    def test_cancelled_rows_do_not_count(self, app, users, workday):
        spot_id = add_spot('S-1')
        add_reservation(spot_id, users['ana'].id, workday, status='cancelled')
        add_reservation(spot_id, users['ana'].id, workday, status='cancelled')

        assert add_reservation(spot_id, users['ana'].id, workday)

    def test_one_live_cession_per_spot(self, app, users, management_spot, workday):
        add_cession(management_spot['id'], users['marta'].id, workday, status='cancelled')
        add_cession(management_spot['id'], users['marta'].id, workday)

        with pytest.raises(sqlite3.IntegrityError):
            add_cession(management_spot['id'], users['marta'].id, workday, status='reserved')

    def test_label_length(self, app):
        with pytest.raises(ValueError):
            add_spot('X' * 21)
