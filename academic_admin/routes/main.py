"""
Main routes: health check for uptime monitoring (no authentication required).
"""

from flask import Blueprint, redirect, url_for, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from academic_admin.extensions import db

# Create blueprint
main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def home():
    """Redirect to the health check; the dashboard is served elsewhere."""
    return redirect(url_for('main.health_check'))


@main_bp.route('/health')
def health_check():
    """Simple health check endpoint for uptime monitoring."""
    try:
        db.session.execute(text('SELECT 1'))
        return 'ok', 200
    except SQLAlchemyError:
        current_app.logger.exception('Health check failed')
        return jsonify(error='Database error'), 500
