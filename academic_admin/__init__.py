"""
Application factory for the academic administration app.

This module provides create_app() which initializes Flask, extensions,
logging and registers blueprints and CLI commands.
"""

import os
import logging
from logging.handlers import RotatingFileHandler

from flask import Flask, request
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# Validate required environment variables
required_env_vars = ["SECRET_KEY", "DATABASE_URL", "FLASK_ENV"]
missing_vars = [var for var in required_env_vars if not os.getenv(var)]
if missing_vars:
    raise RuntimeError(
        "Missing required environment variables: " + ", ".join(missing_vars)
    )


# -------------------- APPLICATION FACTORY --------------------

def create_app():
    """
    Application factory function.

    Creates and configures the Flask application, initializes extensions,
    sets up logging, and registers blueprints and CLI commands.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # -------------------- CONFIGURATION --------------------
    app.config.from_mapping(
        DEBUG=False,
        ENV=os.environ["FLASK_ENV"],
        SECRET_KEY=os.environ["SECRET_KEY"],
        SQLALCHEMY_DATABASE_URI=os.environ["DATABASE_URL"],
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SESSION_COOKIE_SECURE=True,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PROGRESSION_TIMEZONE=os.getenv("PROGRESSION_TIMEZONE", "America/Bogota"),
        ADMIN_SESSION_TIMEOUT_MINUTES=int(os.getenv("ADMIN_SESSION_TIMEOUT_MINUTES", "30")),
    )

    # -------------------- EXTENSIONS --------------------
    from academic_admin.extensions import db, migrate, csrf, limiter

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    limiter.init_app(app)

    # -------------------- LOGGING --------------------
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    log_format = os.getenv(
        "LOG_FORMAT",
        "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(logging.Formatter(log_format))

    app.logger.setLevel(log_level)
    # Prevent duplicate log entries by clearing handlers first
    app.logger.handlers.clear()
    app.logger.addHandler(stream_handler)

    # The progression engine logs through its own named logger
    progression_logger = logging.getLogger("progression")
    progression_logger.setLevel(log_level)
    progression_logger.handlers.clear()
    progression_logger.addHandler(stream_handler)
    progression_logger.propagate = False

    if os.getenv("FLASK_ENV", app.config.get("ENV")) == "production":
        log_file = os.getenv("LOG_FILE", "app.log")
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        app.logger.addHandler(file_handler)
        progression_logger.addHandler(file_handler)

    # -------------------- REGISTER BLUEPRINTS --------------------
    from academic_admin.routes.main import main_bp
    from academic_admin.routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)

    # -------------------- SECURITY HEADERS --------------------
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all HTTP responses."""
        if request.path.startswith('/static/'):
            return response

        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response

    # -------------------- CLI COMMANDS --------------------
    from academic_admin import cli_commands
    cli_commands.init_app(app)

    return app


# Create a default application instance for WSGI servers and the flask CLI
app = create_app()

# Re-export commonly used objects for convenience
from academic_admin.extensions import db  # noqa: E402
from academic_admin.models import AcademicRecord, ClassRecord, Level, Person, StepOverride, UserRole  # noqa: E402
from academic_admin.progression import evaluate_and_advance  # noqa: E402

__all__ = [
    "app",
    "create_app",
    "db",
    "AcademicRecord",
    "ClassRecord",
    "Level",
    "Person",
    "StepOverride",
    "UserRole",
    "evaluate_and_advance",
]
