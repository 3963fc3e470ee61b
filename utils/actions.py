"""
Typed action boundary for the parking engine.

Every public operation is wrapped with @action: input is validated with a
WTForms schema, the caller's identity is checked, and any exception is
converted into a result dict. Callers never see a raw exception.

    Success:  {"success": True, "data": ...}
    Error:    {"success": False, "error": "...", "code": "...",
               "field_errors": {"dates.1": ["..."]}}

Usage:
    @action(CreateReservationForm)
    def create_reservation_action(identity, spot_id, date, notes):
        return {'id': create_reservation(identity, spot_id, date, notes)}

    result = create_reservation_action(current_user, request.get_json())
"""

import logging
from functools import wraps
from typing import Any

from flask import g
from werkzeug.datastructures import MultiDict
from wtforms import FieldList

from utils.errors import ParkingError, NotAuthenticatedError, CascadeFailureError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT CONSTRUCTORS
# =============================================================================

def success(data: Any = None) -> dict:
    """Build a success result."""
    return {'success': True, 'data': data}


def error(message: str, field_errors: dict | None = None, code: str = 'invalid') -> dict:
    """Build an error result. field_errors is only present for validation failures."""
    result = {'success': False, 'error': message, 'code': code}
    if field_errors:
        result['field_errors'] = field_errors
    return result


# =============================================================================
# SCHEMA HELPERS
# =============================================================================

def payload_to_formdata(payload: dict | None) -> MultiDict:
    """
    Flatten a JSON payload into the MultiDict shape WTForms expects.

    Lists are expanded to FieldList keys: {'dates': ['a', 'b']} becomes
    dates-0=a, dates-1=b.
    """
    formdata = MultiDict()
    for key, value in (payload or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                formdata.add(f'{key}-{index}', str(item))
        elif isinstance(value, bool):
            formdata.add(key, 'y' if value else '')
        else:
            formdata.add(key, str(value))
    return formdata


def collect_field_errors(form) -> dict:
    """Collect form errors keyed by dotted field path (e.g. 'dates.2')."""
    field_errors = {}
    for field in form:
        if isinstance(field, FieldList):
            for index, entry in enumerate(field.entries):
                if entry.errors:
                    field_errors[f'{field.name}.{index}'] = list(entry.errors)
            own_errors = [e for e in field.errors if isinstance(e, str)]
            if own_errors:
                field_errors[field.name] = own_errors
        elif field.errors:
            field_errors[field.name] = list(field.errors)
    return field_errors


def _rollback():
    """Roll back whatever the request connection left open."""
    db = g.get('db')
    if db is not None:
        db.rollback()


# =============================================================================
# DECORATOR
# =============================================================================

def action(form_class=None, require_auth: bool = True):
    """
    Wrap an operation so it always returns a typed result.

    Args:
        form_class: WTForms Form used to validate the payload. Its parsed
            data is passed to the handler as keyword arguments.
        require_auth: Reject calls without an authenticated identity.

    Returns:
        Decorator producing func(identity, payload=None) -> dict
    """
    def decorator(func):
        @wraps(func)
        def wrapper(identity, payload: dict | None = None) -> dict:
            if require_auth and (identity is None or not identity.is_authenticated):
                return error(MESSAGES['not_authenticated'], code=NotAuthenticatedError.code)

            if payload is not None and not isinstance(payload, dict):
                return error(MESSAGES['invalid_data'], code='validation')

            try:
                if form_class is not None:
                    form = form_class(formdata=payload_to_formdata(payload))
                    if not form.validate():
                        return error(
                            MESSAGES['invalid_data'],
                            field_errors=collect_field_errors(form),
                            code='validation'
                        )
                    kwargs = form.data
                else:
                    kwargs = dict(payload or {})

                return success(func(identity, **kwargs))
            except CascadeFailureError as e:
                _rollback()
                logger.error(f"{func.__name__}: partial failure for user {getattr(identity, 'id', None)}: {e.message}")
                return error(e.message, code=e.code)
            except ParkingError as e:
                _rollback()
                logger.info(f"{func.__name__} rejected for user {getattr(identity, 'id', None)}: {e.message}")
                return error(e.message, code=e.code)
            except Exception:
                _rollback()
                logger.exception(f"Unexpected error in {func.__name__}")
                return error(MESSAGES['unexpected_error'], code='unexpected')
        return wrapper
    return decorator
