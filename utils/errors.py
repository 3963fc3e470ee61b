"""
Domain exceptions for the parking engine.

Models raise these; the action boundary (utils.actions) turns them into
typed results. They subclass ValueError so callers that only know about
the generic "validation failed" contract keep working.
"""


class ParkingError(ValueError):
    """Base class for expected, user-facing failures."""

    code = 'invalid'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(ParkingError):
    code = 'not_authenticated'


class PermissionDeniedError(ParkingError):
    code = 'forbidden'


class NotFoundError(ParkingError):
    code = 'not_found'


class ConflictError(ParkingError):
    """A uniqueness or exclusivity rule rejected the write."""

    code = 'conflict'


class DataAccessError(ParkingError):
    """A storage read failed; the detail is logged, never returned."""

    code = 'data_access'


class CascadeFailureError(ParkingError):
    """
    The first step of a multi-step write committed but a later one failed.

    Never collapsed into a generic error: the caller must be told that
    manual follow-up is needed.
    """

    code = 'cascade_partial_failure'
