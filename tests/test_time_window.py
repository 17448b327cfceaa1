"""
Tests for range selector resolution.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from prodialer_backend.services.time_window import (
    DEFAULT_RANGE,
    RANGE_DAYS,
    current_instant,
    normalize_range_code,
    resolve_window_start,
)

from tests.conftest import NOW


@pytest.mark.parametrize("code,days", [("7d", 7), ("30d", 30), ("90d", 90)])
def test_known_codes_subtract_whole_days(code, days):
    assert resolve_window_start(code, NOW) == NOW - timedelta(days=days)


@pytest.mark.parametrize("code", ["", None, "1y", "14d", "garbage"])
def test_unknown_codes_use_seven_day_default(code):
    assert normalize_range_code(code) == DEFAULT_RANGE == "7d"
    assert resolve_window_start(code, NOW) == NOW - timedelta(days=7)


def test_codes_are_trimmed_and_case_insensitive():
    assert normalize_range_code(" 30D ") == "30d"


def test_window_follows_the_supplied_now():
    later = NOW + timedelta(hours=5)
    assert resolve_window_start("7d", later) - resolve_window_start("7d", NOW) == timedelta(hours=5)


def test_naive_now_is_treated_as_utc():
    naive = datetime(2026, 10, 19, 15, 0)
    assert resolve_window_start("7d", naive) == NOW - timedelta(days=7)


def test_current_instant_is_aware_in_requested_zone():
    instant = current_instant("America/New_York")
    assert instant.tzinfo is not None
    assert str(instant.tzinfo) == "America/New_York"
    assert abs(instant - datetime.now(timezone.utc)) < timedelta(minutes=1)


def test_range_table_is_fixed():
    assert RANGE_DAYS == {"7d": 7, "30d": 30, "90d": 90}


def test_window_is_absolute_days_across_dst_change():
    # DST ended in New York on 1 Nov 2026, inside this 7-day window.
    new_york = ZoneInfo("America/New_York")
    local_now = datetime(2026, 11, 3, 12, 0, tzinfo=new_york)

    start = resolve_window_start("7d", local_now)

    assert start.astimezone(timezone.utc) == local_now.astimezone(timezone.utc) - timedelta(days=7)
    assert start == datetime(2026, 10, 27, 13, 0, tzinfo=new_york)
