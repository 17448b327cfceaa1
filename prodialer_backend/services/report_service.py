from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Final, List, Optional, Sequence

from prodialer_backend.schemas.contact import Contact, ensure_aware
from prodialer_backend.schemas.report import (
    ActivityRecord,
    DashboardSummary,
    ReportSnapshot,
)
from prodialer_backend.services.call_classifier import is_successful
from prodialer_backend.services.time_window import (
    DEFAULT_RANGE,
    normalize_range_code,
    resolve_window_start,
)
from prodialer_backend.services.timeseries import build_daily_series

logger = logging.getLogger("prodialer.report_service")

RECENT_ACTIVITY_LIMIT: Final[int] = 10
DASHBOARD_RECENT_DAYS: Final[int] = 7


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return _round_half_up(part / whole * 100)


def _increment(counter: Dict[str, int], key: str) -> None:
    counter[key] = counter.get(key, 0) + 1


# ---------------------------------------------------------------------------
# Report aggregation
# ---------------------------------------------------------------------------

def aggregate_report(
    contacts: Sequence[Contact],
    window_start: datetime,
    now: datetime,
    range_code: str = DEFAULT_RANGE,
) -> ReportSnapshot:
    """
    Fold every contact's call history into a ReportSnapshot.

    Only calls at or after `window_start` feed the call totals, the
    breakdowns and the activity feed; `total_leads` is the full roster.
    Calls are attributed to the contact's current status and to every one
    of its current tags, so a contact with two tags counts each call twice
    in `calls_by_tag`.

    The chart series uses its own trailing 7-day window anchored at `now`.
    """
    window_start = ensure_aware(window_start)
    now = ensure_aware(now)

    total_calls = 0
    successful_calls = 0
    duration_sum = 0
    calls_by_status: Dict[str, int] = {}
    calls_by_tag: Dict[str, int] = {}
    activity: List[ActivityRecord] = []

    for contact in contacts:
        for event in contact.call_history:
            if event.time < window_start:
                continue

            total_calls += 1
            duration_sum += event.duration_seconds

            _increment(calls_by_status, contact.status)
            for tag in contact.tags:
                _increment(calls_by_tag, tag)

            if is_successful(event):
                successful_calls += 1

            activity.append(
                ActivityRecord(
                    name=contact.name,
                    phone=contact.phone,
                    outcome=event.outcome,
                    duration=event.duration_seconds,
                    date=event.time,
                    status=contact.status,
                )
            )

    # sorted() is stable, so equal timestamps keep traversal order.
    activity = sorted(activity, key=lambda record: record.date, reverse=True)

    average = _round_half_up(duration_sum / total_calls) if total_calls else 0

    snapshot = ReportSnapshot(
        range_code=range_code,
        window_start=window_start,
        generated_at=now,
        total_leads=len(contacts),
        total_calls=total_calls,
        successful_calls=successful_calls,
        success_rate=_percentage(successful_calls, total_calls),
        average_call_duration=average,
        calls_by_status=calls_by_status,
        calls_by_tag=calls_by_tag,
        recent_activity=tuple(activity[:RECENT_ACTIVITY_LIMIT]),
        chart_data=tuple(build_daily_series(contacts, now)),
    )

    logger.debug(
        "Aggregated report (range=%s, leads=%d, calls=%d, successful=%d)",
        range_code,
        snapshot.total_leads,
        total_calls,
        successful_calls,
    )
    return snapshot


def build_report(
    contacts: Sequence[Contact],
    range_code: Optional[str],
    now: datetime,
) -> ReportSnapshot:
    """
    Resolve the range selector against `now` and aggregate.
    """
    code = normalize_range_code(range_code)
    window_start = resolve_window_start(code, now)
    return aggregate_report(contacts, window_start, now, range_code=code)


# ---------------------------------------------------------------------------
# Dashboard cards
# ---------------------------------------------------------------------------

def compute_dashboard_summary(contacts: Sequence[Contact], now: datetime) -> DashboardSummary:
    """
    Stat cards for the landing dashboard.

    Totals and success rate cover every logged call; `recent_calls` counts
    calls strictly newer than seven days before `now`.
    """
    now = ensure_aware(now)
    recent_cutoff = now - timedelta(days=DASHBOARD_RECENT_DAYS)

    total_calls = 0
    successful_calls = 0
    recent_calls = 0

    for contact in contacts:
        for event in contact.call_history:
            total_calls += 1
            if is_successful(event):
                successful_calls += 1
            if event.time > recent_cutoff:
                recent_calls += 1

    return DashboardSummary(
        generated_at=now,
        total_leads=len(contacts),
        total_calls=total_calls,
        success_rate=_percentage(successful_calls, total_calls),
        recent_calls=recent_calls,
        chart_data=tuple(build_daily_series(contacts, now)),
    )
