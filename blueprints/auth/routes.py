"""
Authentication routes: login, logout, current user.
JSON endpoints backed by Flask-Login sessions.
"""

import logging
from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.actions import collect_field_errors
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with username and password.

    Request body:
        username: Username
        password: Password
        remember_me: Optional boolean

    Returns:
        JSON with the user profile
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(MESSAGES['invalid_data'], status=400, code='validation',
                         field_errors=collect_field_errors(form))

    user_dict = get_user_by_username(form.username.data)

    # Check credentials
    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.info(f"Failed login for '{form.username.data}'")
        return api_error(MESSAGES['invalid_credentials'], status=401, code='not_authenticated')

    # Check if user is active
    if not user_dict.get('active'):
        return api_error(MESSAGES['account_disabled'], status=403, code='forbidden')

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        data=user.to_dict(),
        message=MESSAGES['login_success'].format(name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """Get the current user's profile."""
    return api_success(data=current_user.to_dict())


@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    """
    Get a CSRF token for mutating requests.

    Send it back in the X-CSRFToken header.
    """
    return api_success(data={'csrf_token': generate_csrf()})
