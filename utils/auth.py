import logging
from functools import wraps

from flask import current_app, jsonify, session

from data_tables.admin_setting import ADMIN_PASSCODE_KEY, AdminSetting

"""
passcode login for the admin area. there are two roles:
- admin: sees every questionnaire
- school: only sees the school canteen questionnaire
"""

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'
SCHOOL_ROLE = 'school'


def verify_passcode(passcode):
    """Return the role the passcode belongs to, or None."""
    if not passcode:
        return None

    admin_setting = AdminSetting.get_or_create(ADMIN_PASSCODE_KEY, current_app.config['ADMIN_PASSCODE'])

    if passcode == admin_setting.setting_value:
        return ADMIN_ROLE
    if passcode == current_app.config['SCHOOL_PASSCODE']:
        return SCHOOL_ROLE

    logger.warning('rejected admin passcode')
    return None


def log_in(role):
    session['admin_logged_in'] = True
    session['admin_role'] = role


def log_out():
    session.pop('admin_logged_in', None)
    session.pop('admin_role', None)


def is_logged_in():
    return bool(session.get('admin_logged_in'))


def current_role():
    return session.get('admin_role', ADMIN_ROLE)


def allowed_questionnaire_type(requested_type):
    """School logins are always pinned to the school canteen questionnaire."""
    if current_role() == SCHOOL_ROLE:
        return 'school_canteen'
    return requested_type


def admin_required(view_func):
    """For JSON endpoints: answer 401 instead of redirecting to the login page."""

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if not is_logged_in():
            return jsonify({'error': 'Admin login required'}), 401
        return view_func(*args, **kwargs)

    return wrapper
