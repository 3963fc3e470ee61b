"""
Database schema definitions.
Table creation, indexes, and structure management.

Dates are stored as ISO strings (YYYY-MM-DD) so comparisons and
month ranges work with plain string ordering.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'visitor_reservations',
        'cessions',
        'reservations',
        'spots',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            full_name TEXT,
            role TEXT NOT NULL DEFAULT 'employee'
                CHECK (role IN ('employee', 'management', 'admin')),
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            last_login TEXT
        )
    ''')

    # 2. Spots
    db.execute('''
        CREATE TABLE spots (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            label TEXT UNIQUE NOT NULL CHECK (length(label) <= 20),
            type TEXT NOT NULL DEFAULT 'standard'
                CHECK (type IN ('standard', 'management', 'visitor', 'disabled')),
            assigned_to INTEGER REFERENCES users(id) ON DELETE SET NULL,
            is_active INTEGER DEFAULT 1,
            position_x REAL,
            position_y REAL,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Employee reservations (history kept, never deleted)
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            spot_id INTEGER NOT NULL REFERENCES spots(id),
            user_id INTEGER NOT NULL REFERENCES users(id),
            date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'confirmed'
                CHECK (status IN ('confirmed', 'cancelled')),
            notes TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 4. Management cessions
    db.execute('''
        CREATE TABLE cessions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            spot_id INTEGER NOT NULL REFERENCES spots(id),
            user_id INTEGER NOT NULL REFERENCES users(id),
            date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'available'
                CHECK (status IN ('available', 'reserved', 'cancelled')),
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 5. Visitor reservations
    db.execute('''
        CREATE TABLE visitor_reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            spot_id INTEGER NOT NULL REFERENCES spots(id),
            reserved_by INTEGER NOT NULL REFERENCES users(id),
            date TEXT NOT NULL,
            visitor_name TEXT NOT NULL,
            visitor_company TEXT NOT NULL,
            visitor_email TEXT NOT NULL,
            notes TEXT,
            status TEXT NOT NULL DEFAULT 'confirmed'
                CHECK (status IN ('confirmed', 'cancelled')),
            notification_sent INTEGER DEFAULT 0,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create uniqueness guarantees and lookup indexes."""

    # One confirmed reservation per person per day, and per spot per day
    db.execute('''
        CREATE UNIQUE INDEX uq_reservations_user_date
        ON reservations(user_id, date) WHERE status = 'confirmed'
    ''')
    db.execute('''
        CREATE UNIQUE INDEX uq_reservations_spot_date
        ON reservations(spot_id, date) WHERE status = 'confirmed'
    ''')

    # One live cession per spot per day
    db.execute('''
        CREATE UNIQUE INDEX uq_cessions_spot_date
        ON cessions(spot_id, date) WHERE status <> 'cancelled'
    ''')

    # One confirmed visitor booking per spot per day
    db.execute('''
        CREATE UNIQUE INDEX uq_visitor_reservations_spot_date
        ON visitor_reservations(spot_id, date) WHERE status = 'confirmed'
    ''')

    # Lookup indexes
    db.execute('CREATE INDEX idx_spots_active ON spots(is_active, label)')
    db.execute('CREATE INDEX idx_spots_assigned ON spots(assigned_to)')
    db.execute('CREATE INDEX idx_reservations_date ON reservations(date, status)')
    db.execute('CREATE INDEX idx_cessions_date ON cessions(date, status)')
    db.execute('CREATE INDEX idx_cessions_user ON cessions(user_id, date)')
    db.execute('CREATE INDEX idx_visitor_reservations_date ON visitor_reservations(date, status)')
