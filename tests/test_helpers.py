"""
Tests for request/value helpers:
1. Boolean coercion of JSON and migrated 'Sí'/'No' values
2. ISO timestamps normalized to naive UTC
3. Local date in the academy timezone
"""
import re
from datetime import datetime

import pytest

from academic_admin.utils.helpers import coerce_bool, format_utc_iso, local_today, parse_iso_datetime


@pytest.mark.parametrize("value, expected", [
    (True, True),
    (False, False),
    (None, None),
    (1, True),
    (0, False),
    ("true", True),
    ("Sí", True),
    ("No", False),
    (" FALSE ", False),
])
def test_coerce_bool(value, expected):
    assert coerce_bool(value) is expected


@pytest.mark.parametrize("value", ["maybe", 2, [], {}])
def test_coerce_bool_rejects_garbage(value):
    with pytest.raises(ValueError):
        coerce_bool(value)


def test_parse_iso_datetime_normalizes_to_utc():
    assert parse_iso_datetime("2026-03-01T05:00:00-05:00") == datetime(2026, 3, 1, 10, 0)
    assert parse_iso_datetime("2026-03-01T10:00:00Z") == datetime(2026, 3, 1, 10, 0)
    assert parse_iso_datetime("") is None
    with pytest.raises(ValueError):
        parse_iso_datetime("yesterday")


def test_format_utc_iso_round_trips_naive_values():
    assert format_utc_iso(datetime(2026, 3, 1, 10, 0)).startswith("2026-03-01T10:00:00")


def test_local_today_format(app):
    with app.app_context():
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", local_today())
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", local_today("Not/AZone"))
