from __future__ import annotations

from typing import Final

from prodialer_backend.schemas.contact import CallEvent

SUCCESS_OUTCOME: Final[str] = "Answered"
SUCCESS_MIN_DURATION_SECONDS: Final[int] = 30


def is_successful(event: CallEvent) -> bool:
    """
    A call counts as successful when it was answered and lasted longer
    than SUCCESS_MIN_DURATION_SECONDS. Shared by the dashboard, the
    report and the chart.
    """
    return (
        event.outcome == SUCCESS_OUTCOME
        and event.duration_seconds > SUCCESS_MIN_DURATION_SECONDS
    )
