"""
Tests for reservation/cession synchronization and drift repair.
"""

import logging
import sqlite3
import pytest
from datetime import timedelta

from conftest import add_cession, add_reservation, fetch_status


class TestFlipCessionStatus:
    """Tests for the narrow status flip."""

    def test_flip_is_conditional(self, app, users, management_spot, workday):
        from database import get_db
        from models.cession_sync import flip_cession_status

        db = get_db()
        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)

        assert flip_cession_status(db, management_spot['id'], workday.isoformat(), 'available', 'reserved') == 1
        assert flip_cession_status(db, management_spot['id'], workday.isoformat(), 'available', 'reserved') == 0
        db.commit()

        assert fetch_status('cessions', cession_id) == 'reserved'

    def test_rejects_other_transitions(self, app, management_spot, workday):
        from database import get_db
        from models.cession_sync import flip_cession_status

        with pytest.raises(ValueError):
            flip_cession_status(get_db(), management_spot['id'], workday.isoformat(), 'available', 'cancelled')

    def test_cancel_dependent_reservation(self, app, users, management_spot, workday):
        from database import get_db
        from models.cession_sync import cancel_dependent_reservation

        db = get_db()
        reservation_id = add_reservation(management_spot['id'], users['ana'].id, workday)

        assert cancel_dependent_reservation(db, reservation_id) == 1
        assert cancel_dependent_reservation(db, reservation_id) == 0
        db.commit()


class TestBestEffortSync:
    """A failed flip never fails the reservation."""

    def test_flip_failure_keeps_reservation(self, app, users, management_spot, workday, monkeypatch, caplog):
        from models import cession_sync
        from models.reservation import create_reservation, get_reservation_by_id

        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)

        def failing_flip(*args, **kwargs):
            raise sqlite3.OperationalError('database is locked')

        monkeypatch.setattr(cession_sync, 'flip_cession_status', failing_flip)

        with caplog.at_level(logging.WARNING, logger='models.cession_sync'):
            reservation_id = create_reservation(users['ana'], management_spot['id'], workday)

        assert get_reservation_by_id(reservation_id)['status'] == 'confirmed'
        assert fetch_status('cessions', cession_id) == 'available'
        assert any('reconcile-cessions' in record.getMessage() for record in caplog.records)

    def test_cancel_flip_failure_keeps_cancel(self, app, users, management_spot, workday, monkeypatch):
        from models import cession_sync
        from models.reservation import cancel_reservation, create_reservation

        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)
        reservation_id = create_reservation(users['ana'], management_spot['id'], workday)

        def failing_flip(*args, **kwargs):
            raise sqlite3.OperationalError('database is locked')

        monkeypatch.setattr(cession_sync, 'flip_cession_status', failing_flip)

        result = cancel_reservation(users['ana'], reservation_id)

        assert result['cession_released'] is False
        assert fetch_status('reservations', reservation_id) == 'cancelled'
        assert fetch_status('cessions', cession_id) == 'reserved'


class TestReconcileCessionStatuses:
    """Tests for reconcile_cession_statuses."""

    def test_repairs_both_directions(self, app, users, management_spot, workday):
        from models.cession_sync import reconcile_cession_statuses

        other_day = workday + timedelta(days=7)
        # Booked but still 'available'
        stale_available = add_cession(management_spot['id'], users['marta'].id, workday)
        add_reservation(management_spot['id'], users['ana'].id, workday)
        # 'reserved' with nobody booked
        stale_reserved = add_cession(management_spot['id'], users['marta'].id, other_day, status='reserved')

        result = reconcile_cession_statuses()

        assert result == {'marked_reserved': 1, 'marked_available': 1}
        assert fetch_status('cessions', stale_available) == 'reserved'
        assert fetch_status('cessions', stale_reserved) == 'available'

    def test_no_drift(self, app, users, management_spot, workday):
        from models.cession_sync import reconcile_cession_statuses

        add_cession(management_spot['id'], users['marta'].id, workday)
        assert reconcile_cession_statuses() == {'marked_reserved': 0, 'marked_available': 0}

    def test_since_limits_range(self, app, users, management_spot, workday):
        from models.cession_sync import reconcile_cession_statuses

        later = workday + timedelta(days=7)
        early = add_cession(management_spot['id'], users['marta'].id, workday, status='reserved')
        late = add_cession(management_spot['id'], users['marta'].id, later, status='reserved')

        result = reconcile_cession_statuses(since=later)

        assert result['marked_available'] == 1
        assert fetch_status('cessions', early) == 'reserved'
        assert fetch_status('cessions', late) == 'available'

    def test_cancelled_cessions_untouched(self, app, users, management_spot, workday):
        from models.cession_sync import reconcile_cession_statuses

        cession_id = add_cession(management_spot['id'], users['marta'].id, workday, status='cancelled')
        add_reservation(management_spot['id'], users['ana'].id, workday)

        reconcile_cession_statuses()
        assert fetch_status('cessions', cession_id) == 'cancelled'
