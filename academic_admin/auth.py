"""
Authentication helpers for the academic administration API.

Login itself is handled by the dashboard; API calls only check the admin
session it leaves behind and enforce an inactivity timeout.
"""

from datetime import datetime, timedelta, timezone
from functools import wraps

from flask import session, jsonify, current_app
from sqlalchemy import func

ADMIN_ROLES = {'SUPER_ADMIN', 'ADMIN', 'ADVISOR', 'ACADEMICO'}


def get_current_admin():
    """Return the active UserRole for the session's admin, or None."""
    from academic_admin.models import UserRole

    email = session.get('admin_email')
    if not email:
        return None
    user = UserRole.query.filter(func.lower(UserRole.email) == email.lower()).first()
    if not user or not user.is_active or user.role not in ADMIN_ROLES:
        return None
    return user


def _clear_admin_session():
    session.pop('admin_email', None)
    session.pop('last_activity', None)


def admin_required(f):
    """
    Decorator to require an admin session for a JSON route.

    Enforces the inactivity timeout from ADMIN_SESSION_TIMEOUT_MINUTES and
    answers 401 JSON instead of redirecting.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        admin = get_current_admin()
        if not admin:
            _clear_admin_session()
            return jsonify(error='Unauthorized'), 401

        timeout = current_app.config.get('ADMIN_SESSION_TIMEOUT_MINUTES', 30)
        last_activity = session.get('last_activity')
        now = datetime.now(timezone.utc)
        if last_activity:
            try:
                last = datetime.fromisoformat(last_activity)
            except ValueError:
                last = None
            if last is None or now - last > timedelta(minutes=timeout):
                current_app.logger.info(f"Admin session expired for {admin.email}")
                _clear_admin_session()
                return jsonify(error='Session expired'), 401

        session['last_activity'] = now.isoformat()
        return f(*args, **kwargs)
    return decorated_function
