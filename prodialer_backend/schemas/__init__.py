"""Pydantic schemas for contacts and computed reports."""

from .contact import CallEvent, Contact  # noqa: F401
from .report import (  # noqa: F401
    ActivityRecord,
    ChartPoint,
    DashboardSummary,
    ReportSnapshot,
)
