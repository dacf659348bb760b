"""
Shared Flask extension instances.

Centralized to avoid circular imports. Extensions are initialized
here but configured in create_app().
"""

import os
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_wtf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions (without binding to an app yet)
db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()


def get_real_ip_for_limiter():
    """Get real IP for rate limiting, honoring the first X-Forwarded-For hop."""
    try:
        from flask import request
        forwarded_for = request.headers.get('X-Forwarded-For')
        if forwarded_for:
            return forwarded_for.split(',')[0].strip()
        return request.remote_addr
    except RuntimeError:
        return get_remote_address()


# Memory storage unless a shared backend is configured explicitly
storage_uri = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

limiter = Limiter(
    key_func=get_real_ip_for_limiter,
    default_limits=["2000 per day", "500 per hour"],
    storage_uri=storage_uri,
    strategy="fixed-window"
)
