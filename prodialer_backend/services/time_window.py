from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Final, Optional
from zoneinfo import ZoneInfo

from prodialer_backend.schemas.contact import ensure_aware

logger = logging.getLogger("prodialer.time_window")

RANGE_DAYS: Final[Dict[str, int]] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
}

# Unknown range codes resolve to this window rather than raising.
DEFAULT_RANGE: Final[str] = "7d"


def normalize_range_code(range_code: Optional[str]) -> str:
    """
    Map a range selector onto one of RANGE_DAYS.

    Callers that need strict validation should check against RANGE_DAYS
    before calling.
    """
    code = (range_code or "").strip().lower()
    if code in RANGE_DAYS:
        return code
    logger.info("Unrecognized range code %r; using default %s", range_code, DEFAULT_RANGE)
    return DEFAULT_RANGE


def resolve_window_start(range_code: Optional[str], now: datetime) -> datetime:
    """
    Return the earliest instant counted for the given range, relative to `now`.

    The window spans N x 24 hours of absolute time, even across a DST change
    in `now`'s zone.
    """
    days = RANGE_DAYS[normalize_range_code(range_code)]
    now = ensure_aware(now)
    return (now.astimezone(timezone.utc) - timedelta(days=days)).astimezone(now.tzinfo)


def current_instant(tz_name: str = "UTC") -> datetime:
    """
    Read the wall clock once, as an aware datetime in the report timezone.

    Entry points call this and pass the result down; nothing below them
    samples the clock on its own.
    """
    return datetime.now(ZoneInfo(tz_name))
