"""
Shared helpers for date handling and request payload parsing.
"""

from datetime import datetime, timezone

import pytz
from flask import current_app

DEFAULT_TIMEZONE = 'America/Bogota'


def format_utc_iso(dt):
    """Return a UTC ISO-8601 string (with trailing Z) for a datetime or None."""
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def parse_iso_datetime(value):
    """
    Parse an ISO-8601 string into a naive UTC datetime.

    Accepts a trailing 'Z'. Returns None for empty values and raises
    ValueError for malformed input.
    """
    if not value:
        return None
    dt = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def local_today(tz_name=None):
    """
    Return today's date string (YYYY-MM-DD) in the academy's timezone.

    Falls back to the configured PROGRESSION_TIMEZONE, then to Bogota.
    """
    if tz_name is None:
        try:
            tz_name = current_app.config.get('PROGRESSION_TIMEZONE', DEFAULT_TIMEZONE)
        except RuntimeError:
            tz_name = DEFAULT_TIMEZONE
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        try:
            current_app.logger.warning(f"Invalid timezone '{tz_name}', defaulting to {DEFAULT_TIMEZONE}.")
        except RuntimeError:
            print(f"WARNING: Invalid timezone '{tz_name}', defaulting to {DEFAULT_TIMEZONE}.")
        tz = pytz.timezone(DEFAULT_TIMEZONE)
    return datetime.now(timezone.utc).astimezone(tz).strftime('%Y-%m-%d')


def coerce_bool(value):
    """
    Interpret JSON/form booleans, including the 'Sí'/'No' strings of migrated rows.

    Returns None for missing values and raises ValueError for anything else.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        low = value.strip().lower()
        if low in {"1", "true", "yes", "on", "sí", "si"}:
            return True
        if low in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"Not a boolean value: {value!r}")
