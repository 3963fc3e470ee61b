"""
Tests for the employee reservation lifecycle.
"""

import pytest
from datetime import timedelta

from conftest import add_cession, add_reservation, add_spot, fetch_status


class TestCreateReservation:
    """Tests for create_reservation."""

    def test_creates_confirmed_reservation(self, app, users, workday):
        from models.reservation import create_reservation, get_reservation_by_id

        spot_id = add_spot('S-1')
        reservation_id = create_reservation(users['ana'], spot_id, workday, notes='Llego tarde')

        reservation = get_reservation_by_id(reservation_id)
        assert reservation['status'] == 'confirmed'
        assert reservation['user_id'] == users['ana'].id
        assert reservation['date'] == workday.isoformat()
        assert reservation['notes'] == 'Llego tarde'
        assert reservation['spot_label'] == 'S-1'

    def test_accepts_iso_string(self, app, users, workday):
        from models.reservation import create_reservation, get_reservation_by_id

        spot_id = add_spot('S-1')
        reservation_id = create_reservation(users['ana'], spot_id, workday.isoformat())

        reservation = get_reservation_by_id(reservation_id)
        assert reservation['spot_id'] == spot_id
        assert reservation['date'] == workday.isoformat()

    def test_one_reservation_per_person_per_day(self, app, users, workday):
        """A second booking the same day fails regardless of the spot."""
        from models.reservation import create_reservation
        from utils.errors import ConflictError
        from utils.messages import MESSAGES

        create_reservation(users['ana'], add_spot('S-1'), workday)

        with pytest.raises(ConflictError) as exc_info:
            create_reservation(users['ana'], add_spot('S-2'), workday)
        assert exc_info.value.message == MESSAGES['already_reserved_that_day']

    def test_one_reservation_per_spot_per_day(self, app, users, workday):
        """The storage unique violation is translated to 'spot already reserved'."""
        from models.reservation import create_reservation
        from utils.errors import ConflictError
        from utils.messages import MESSAGES

        spot_id = add_spot('S-1')
        create_reservation(users['ana'], spot_id, workday)

        with pytest.raises(ConflictError) as exc_info:
            create_reservation(users['bruno'], spot_id, workday)
        assert exc_info.value.message == MESSAGES['spot_already_reserved']

    def test_same_spot_other_day_allowed(self, app, users, workday):
        from models.reservation import create_reservation

        spot_id = add_spot('S-1')
        create_reservation(users['ana'], spot_id, workday)
        assert create_reservation(users['bruno'], spot_id, workday + timedelta(days=7))

    def test_past_date_rejected(self, app, users):
        from models.reservation import create_reservation
        from utils.datetime_helpers import get_today
        from utils.errors import ParkingError

        with pytest.raises(ParkingError):
            create_reservation(users['ana'], add_spot('S-1'), get_today() - timedelta(days=1))

    def test_missing_spot(self, app, users, workday):
        from models.reservation import create_reservation
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            create_reservation(users['ana'], 9999, workday)

    def test_inactive_spot(self, app, users, workday):
        from models.reservation import create_reservation
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            create_reservation(users['ana'], add_spot('S-1', is_active=False), workday)

    def test_visitor_blocked_spot(self, app, users, workday):
        from models.reservation import create_reservation
        from models.visitor_reservation import create_visitor_booking
        from utils.errors import ConflictError

        spot_id = add_spot('V-1', 'visitor')
        create_visitor_booking(users['bruno'], spot_id, workday, 'Laura Vidal', 'Acme', 'laura@acme.com')

        with pytest.raises(ConflictError):
            create_reservation(users['ana'], spot_id, workday)

    def test_failed_create_leaves_no_row(self, app, users, workday):
        from database import get_db
        from models.reservation import create_reservation
        from utils.errors import ConflictError

        spot_id = add_spot('S-1')
        create_reservation(users['ana'], spot_id, workday)
        with pytest.raises(ConflictError):
            create_reservation(users['bruno'], spot_id, workday)

        count = get_db().execute('SELECT COUNT(*) FROM reservations').fetchone()[0]
        assert count == 1


class TestManagementSpotReservation:
    """Booking a ceded management spot keeps the cession in step."""

    def test_uncede_spot_rejected(self, app, users, management_spot, workday):
        from models.reservation import create_reservation
        from utils.errors import ConflictError
        from utils.messages import MESSAGES

        with pytest.raises(ConflictError) as exc_info:
            create_reservation(users['ana'], management_spot['id'], workday)
        assert exc_info.value.message == MESSAGES['spot_not_ceded']

    def test_booking_flips_cession_to_reserved(self, app, users, management_spot, workday):
        from models.reservation import create_reservation

        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)
        create_reservation(users['ana'], management_spot['id'], workday)

        assert fetch_status('cessions', cession_id) == 'reserved'

    def test_reserved_cession_rejects_second_booking(self, app, users, management_spot, workday):
        from models.reservation import create_reservation
        from utils.errors import ConflictError

        add_cession(management_spot['id'], users['marta'].id, workday)
        create_reservation(users['ana'], management_spot['id'], workday)

        with pytest.raises(ConflictError):
            create_reservation(users['bruno'], management_spot['id'], workday)

    def test_cancel_flips_cession_back(self, app, users, management_spot, workday):
        from models.reservation import cancel_reservation, create_reservation

        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)
        reservation_id = create_reservation(users['ana'], management_spot['id'], workday)

        result = cancel_reservation(users['ana'], reservation_id)

        assert result['cession_released'] is True
        assert fetch_status('cessions', cession_id) == 'available'

    def test_standard_spot_touches_no_cession(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation

        reservation_id = create_reservation(users['ana'], add_spot('S-1'), workday)
        assert cancel_reservation(users['ana'], reservation_id)['cession_released'] is False


class TestCancelReservation:
    """Tests for cancel_reservation."""

    def test_cancel_own(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation

        reservation_id = create_reservation(users['ana'], add_spot('S-1'), workday)
        result = cancel_reservation(users['ana'], reservation_id)

        assert result == {'cancelled': True, 'already_cancelled': False, 'cession_released': False}
        assert fetch_status('reservations', reservation_id) == 'cancelled'

    def test_cancel_is_idempotent(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation

        reservation_id = create_reservation(users['ana'], add_spot('S-1'), workday)
        cancel_reservation(users['ana'], reservation_id)
        result = cancel_reservation(users['ana'], reservation_id)

        assert result['cancelled'] is True
        assert result['already_cancelled'] is True

    def test_cannot_cancel_someone_elses(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation
        from utils.errors import PermissionDeniedError

        reservation_id = create_reservation(users['ana'], add_spot('S-1'), workday)

        with pytest.raises(PermissionDeniedError):
            cancel_reservation(users['bruno'], reservation_id)
        assert fetch_status('reservations', reservation_id) == 'confirmed'

    def test_missing_reservation(self, app, users):
        from models.reservation import cancel_reservation
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            cancel_reservation(users['ana'], 9999)

    def test_spot_bookable_again_after_cancel(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation

        spot_id = add_spot('S-1')
        reservation_id = create_reservation(users['ana'], spot_id, workday)
        cancel_reservation(users['ana'], reservation_id)

        assert create_reservation(users['bruno'], spot_id, workday)
        assert create_reservation(users['ana'], add_spot('S-2'), workday)


class TestUserReservations:
    """Tests for get_user_reservations."""

    def test_lists_upcoming_confirmed_only(self, app, users, workday):
        from models.reservation import cancel_reservation, create_reservation, get_user_reservations
        from utils.datetime_helpers import get_today

        spot_id = add_spot('S-1')
        add_reservation(spot_id, users['ana'].id, get_today() - timedelta(days=3))
        keep = create_reservation(users['ana'], spot_id, workday)
        dropped = create_reservation(users['ana'], spot_id, workday + timedelta(days=7))
        cancel_reservation(users['ana'], dropped)

        assert [r['id'] for r in get_user_reservations(users['ana'].id)] == [keep]
