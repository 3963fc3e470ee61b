"""
Spot model.
Read access to the parking spot pool. Spots are administered outside the
engine; create_spot exists for seeding and the CLI.
"""

from database import get_db


# =============================================================================
# TYPE CONSTANTS
# =============================================================================

SPOT_TYPES = {
    'standard': 'Estándar',
    'management': 'Dirección',
    'visitor': 'Visitantes',
    'disabled': 'Movilidad reducida',
}

# Spots that count toward the employee pool on the calendar
POOL_SPOT_TYPES = ('standard', 'disabled')

MAX_LABEL_LENGTH = 20


# =============================================================================
# QUERIES
# =============================================================================

def get_spot_by_id(spot_id: int) -> dict:
    """
    Get spot by ID.

    Args:
        spot_id: Spot ID

    Returns:
        Spot dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM spots WHERE id = ?', (spot_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_assigned_management_spot(user_id: int) -> dict:
    """
    Get the management spot assigned to a user.

    Args:
        user_id: Owner user ID

    Returns:
        Spot dict or None if the user owns no management spot
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM spots
        WHERE assigned_to = ?
          AND type = 'management'
          AND is_active = 1
        ORDER BY label
        LIMIT 1
    ''', (user_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


# =============================================================================
# CREATE
# =============================================================================

def create_spot(label: str, spot_type: str = 'standard', assigned_to: int = None,
                is_active: bool = True) -> int:
    """
    Create a spot.

    Args:
        label: Unique label (max 20 chars)
        spot_type: One of SPOT_TYPES
        assigned_to: Owner user ID (management spots only)
        is_active: Whether the spot is in service

    Returns:
        int: New spot ID

    Raises:
        ValueError: If validation fails
        sqlite3.IntegrityError: If the label already exists
    """
    label = (label or '').strip()
    if not label or len(label) > MAX_LABEL_LENGTH:
        raise ValueError(f"La etiqueta debe tener entre 1 y {MAX_LABEL_LENGTH} caracteres")
    if spot_type not in SPOT_TYPES:
        raise ValueError(f"Tipo de plaza no válido: {spot_type}")
    if assigned_to is not None and spot_type != 'management':
        raise ValueError("Solo las plazas de dirección pueden tener propietario")

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO spots (label, type, assigned_to, is_active)
        VALUES (?, ?, ?, ?)
    ''', (label, spot_type, assigned_to, 1 if is_active else 0))
    db.commit()
    return cursor.lastrowid
