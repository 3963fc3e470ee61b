"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import timedelta

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'parking_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Create authenticated test client (seeded admin)."""
    login(client, 'admin', 'admin123')
    return client


# =============================================================================
# HELPERS
# =============================================================================

def login(client, username, password='secret123'):
    """Log a test client in through the JSON endpoint."""
    return client.post('/auth/login', json={'username': username, 'password': password})


def next_weekday(start, skip=0):
    """First weekday on or after start, then skip that many more weekdays."""
    day = start
    while day.weekday() >= 5:
        day += timedelta(days=1)
    for _ in range(skip):
        day += timedelta(days=1)
        while day.weekday() >= 5:
            day += timedelta(days=1)
    return day


def add_spot(label, spot_type='standard', assigned_to=None, is_active=True):
    """Insert a spot and return its id."""
    from models.spot import create_spot
    return create_spot(label, spot_type=spot_type, assigned_to=assigned_to, is_active=is_active)


def add_reservation(spot_id, user_id, day, status='confirmed'):
    """Insert a reservation row directly, bypassing the lifecycle checks."""
    from database import get_db

    db = get_db()
    cursor = db.execute('''
        INSERT INTO reservations (spot_id, user_id, date, status)
        VALUES (?, ?, ?, ?)
    ''', (spot_id, user_id, day.isoformat(), status))
    db.commit()
    return cursor.lastrowid


def add_cession(spot_id, user_id, day, status='available'):
    """Insert a cession row directly."""
    from database import get_db

    db = get_db()
    cursor = db.execute('''
        INSERT INTO cessions (spot_id, user_id, date, status)
        VALUES (?, ?, ?, ?)
    ''', (spot_id, user_id, day.isoformat(), status))
    db.commit()
    return cursor.lastrowid


def fetch_status(table, row_id):
    """Read the status column of a row."""
    from database import get_db

    row = get_db().execute(f'SELECT status FROM {table} WHERE id = ?', (row_id,)).fetchone()
    return row['status'] if row else None


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
def empty_pool(app):
    """Remove the seeded spots so a test controls the whole pool."""
    from database import get_db

    db = get_db()
    db.execute('DELETE FROM spots')
    db.commit()


@pytest.fixture
def users(app):
    """
    Create one user per role and return their identities.

    Returns:
        dict: {'admin', 'ana', 'bruno', 'marta'} -> User
              (ana and bruno are employees, marta is management)
    """
    from models.user import User, create_user, get_user_by_id, get_user_by_username

    ana_id = create_user('ana', 'ana@parking.local', 'secret123', full_name='Ana Ruiz')
    bruno_id = create_user('bruno', 'bruno@parking.local', 'secret123', full_name='Bruno Gil')
    marta_id = create_user('marta', 'marta@parking.local', 'secret123',
                           full_name='Marta Díaz', role='management')

    return {
        'admin': User(get_user_by_username('admin')),
        'ana': User(get_user_by_id(ana_id)),
        'bruno': User(get_user_by_id(bruno_id)),
        'marta': User(get_user_by_id(marta_id)),
    }


@pytest.fixture
def management_spot(users):
    """A management spot assigned to marta."""
    from models.spot import get_spot_by_id

    spot_id = add_spot('D-TEST', 'management', assigned_to=users['marta'].id)
    return get_spot_by_id(spot_id)


@pytest.fixture
def workday(app):
    """A future weekday (at least tomorrow)."""
    from utils.datetime_helpers import get_today

    return next_weekday(get_today() + timedelta(days=1))
