from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Final, List, Sequence

from prodialer_backend.schemas.contact import Contact, ensure_aware
from prodialer_backend.schemas.report import ChartPoint
from prodialer_backend.services.call_classifier import is_successful

logger = logging.getLogger("prodialer.timeseries")

CHART_DAYS: Final[int] = 7


def format_chart_label(day: date) -> str:
    """Short month plus unpadded day, e.g. "Oct 19"."""
    return f"{day.strftime('%b')} {day.day}"


def chart_days(now: datetime) -> List[date]:
    """Today and the preceding six calendar days in `now`'s timezone, oldest first."""
    today = ensure_aware(now).date()
    return [today - timedelta(days=offset) for offset in range(CHART_DAYS - 1, -1, -1)]


def build_daily_series(contacts: Sequence[Contact], now: datetime) -> List[ChartPoint]:
    """
    Count calls per calendar day over the trailing seven days.

    This window is fixed and independent of any report range: a call
    older than six days is left out of the chart even when the report
    totals include it.
    """
    now = ensure_aware(now)
    tz = now.tzinfo
    days = chart_days(now)

    index: Dict[date, int] = {day: i for i, day in enumerate(days)}
    totals = [0] * len(days)
    successes = [0] * len(days)

    for contact in contacts:
        for event in contact.call_history:
            slot = index.get(event.time.astimezone(tz).date())
            if slot is None:
                continue
            totals[slot] += 1
            if is_successful(event):
                successes[slot] += 1

    return [
        ChartPoint(
            label=format_chart_label(day),
            day=day,
            total_calls=totals[i],
            successful_calls=successes[i],
        )
        for i, day in enumerate(days)
    ]
