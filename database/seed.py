"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Default administrator
    db.execute('''
        INSERT INTO users (username, email, password_hash, full_name, role)
        VALUES (?, ?, ?, ?, ?)
    ''', ('admin', 'admin@parking.local', generate_password_hash('admin123'),
          'Administrador', 'admin'))

    # 2. Spot pool: standard, accessible and visitor spots.
    # Management spots are created unassigned and handed out by an administrator.
    spots_data = [
        *[(f'P-{n:02d}', 'standard') for n in range(1, 9)],
        ('PMR-01', 'disabled'),
        ('V-01', 'visitor'),
        ('V-02', 'visitor'),
        ('D-01', 'management'),
        ('D-02', 'management'),
    ]

    for label, spot_type in spots_data:
        db.execute('''
            INSERT INTO spots (label, type)
            VALUES (?, ?)
        ''', (label, spot_type))
