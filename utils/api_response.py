"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "Spanish error message"}

Usage:
    from utils.api_response import api_success, api_error, api_result

    return api_success(data={'id': 1}, message='Creado exitosamente')
    return api_error('Datos requeridos', status=400)
    return api_result(create_reservation_action(current_user, payload), status=201)
"""

from flask import jsonify
from typing import Any

# HTTP status for each error code produced by utils.actions
STATUS_BY_CODE = {
    'validation': 400,
    'invalid': 400,
    'not_authenticated': 401,
    'forbidden': 403,
    'not_found': 404,
    'conflict': 409,
    'data_access': 503,
    'cascade_partial_failure': 500,
    'unexpected': 500,
}


def api_success(
    data: Any = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message (Spanish).
        warning: Optional warning message (Spanish).
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message (Spanish).
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., field_errors, code).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_result(result: dict, status: int = 200, message: str | None = None) -> tuple:
    """
    Render an action result (see utils.actions) as a JSON response.

    Args:
        result: Result dict returned by an @action-wrapped operation.
        status: HTTP status code on success.
        message: Optional success message.

    Returns:
        Tuple of (Response, status_code)
    """
    if result['success']:
        return api_success(data=result['data'], message=message, status=status)

    extra = {key: value for key, value in result.items()
             if key not in ('success', 'error')}
    return api_error(
        result['error'],
        status=STATUS_BY_CODE.get(result.get('code'), 400),
        **extra
    )
