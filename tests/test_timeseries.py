"""
Tests for the fixed 7-day chart series.
"""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from prodialer_backend.services.timeseries import (
    build_daily_series,
    chart_days,
    format_chart_label,
)

from tests.conftest import NOW, call, make_contact


def test_always_seven_zero_seeded_bins_oldest_first():
    points = build_daily_series([], NOW)

    assert len(points) == 7
    assert [p.day for p in points] == [date(2026, 10, d) for d in range(13, 20)]
    assert [p.label for p in points] == [f"Oct {d}" for d in range(13, 20)]
    assert all(p.total_calls == 0 and p.successful_calls == 0 for p in points)


def test_bins_by_calendar_day_not_rolling_hours():
    # 00:05 on the 18th is more than 24h before NOW yet shares the 18th bin with 23:55.
    early = datetime(2026, 10, 18, 0, 5, tzinfo=timezone.utc)
    late = datetime(2026, 10, 18, 23, 55, tzinfo=timezone.utc)
    contact = make_contact(
        calls=[
            {"time": early, "durationSeconds": 50, "outcome": "Answered"},
            {"time": late, "durationSeconds": 5, "outcome": "Answered"},
        ]
    )

    points = build_daily_series([contact], NOW)
    by_day = {p.day: p for p in points}

    assert by_day[date(2026, 10, 18)].total_calls == 2
    assert by_day[date(2026, 10, 18)].successful_calls == 1


def test_calls_outside_span_are_ignored():
    contact = make_contact(
        calls=[
            call(days_ago=7),
            call(days_ago=30),
            {"time": datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc), "outcome": "Answered"},
            call(days_ago=6),
        ]
    )

    points = build_daily_series([contact], NOW)

    assert sum(p.total_calls for p in points) == 1
    assert points[0].total_calls == 1


def test_successful_never_exceeds_total():
    contacts = [
        make_contact(
            calls=[call(days_ago=d, duration=dur, outcome=o)
                   for d in range(7)
                   for dur, o in ((10, "Answered"), (90, "Answered"), (90, "Busy"))]
        )
    ]

    for point in build_daily_series(contacts, NOW):
        assert point.total_calls >= point.successful_calls >= 0
        assert point.total_calls == 3
        assert point.successful_calls == 1


def test_days_follow_the_clock_timezone():
    eastern_now = NOW.astimezone(ZoneInfo("America/New_York"))  # 11:00 EDT on the 19th
    # 02:00 UTC on the 19th is 22:00 on the 18th in New York.
    contact = make_contact(
        calls=[{"time": datetime(2026, 10, 19, 2, 0, tzinfo=timezone.utc), "outcome": "Busy"}]
    )

    points = build_daily_series([contact], eastern_now)
    by_day = {p.day: p.total_calls for p in points}

    assert by_day[date(2026, 10, 18)] == 1
    assert by_day[date(2026, 10, 19)] == 0


def test_chart_days_and_labels():
    assert chart_days(NOW)[-1] == date(2026, 10, 19)
    assert format_chart_label(date(2026, 1, 3)) == "Jan 3"
