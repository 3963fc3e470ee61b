"""
Route decorators for authentication and authorization.
Provides role-based access control for routes.
"""

from functools import wraps
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import MESSAGES


def role_required(*roles: str):
    """
    Decorator to require one of the given roles for a route.

    Usage:
        @bp.route('/admin/reconcile-cessions', methods=['POST'])
        @login_required
        @role_required('admin')
        def reconcile():
            ...

    Args:
        roles: Accepted role names ('employee', 'management', 'admin')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if current_user.role not in roles:
                return api_error(MESSAGES['permission_denied'], status=403, code='forbidden')
            return func(*args, **kwargs)
        return wrapper
    return decorator


# Re-export login_required for convenience
__all__ = ['login_required', 'role_required']
