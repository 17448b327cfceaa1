from __future__ import annotations

import datetime
from typing import Dict, Tuple

from pydantic import ConfigDict, Field

from prodialer_backend.schemas.contact import CamelModel


class ReportModel(CamelModel):
    """Computed results are immutable once built."""

    model_config = ConfigDict(frozen=True)


class ActivityRecord(ReportModel):
    """One in-window call, denormalized with its owning contact's details."""

    name: str
    phone: str
    outcome: str
    duration: int
    date: datetime.datetime
    status: str


class ChartPoint(ReportModel):
    """One calendar-day bin of the 7-day activity chart."""

    label: str
    day: datetime.date
    total_calls: int = 0
    successful_calls: int = 0


class ReportSnapshot(ReportModel):
    """Result of one aggregation run over the contact roster."""

    range_code: str
    window_start: datetime.datetime
    generated_at: datetime.datetime

    total_leads: int
    total_calls: int
    successful_calls: int
    success_rate: int = Field(ge=0, le=100)
    average_call_duration: int

    calls_by_status: Dict[str, int]
    calls_by_tag: Dict[str, int]
    recent_activity: Tuple[ActivityRecord, ...]
    chart_data: Tuple[ChartPoint, ...]


class DashboardSummary(ReportModel):
    """Numbers behind the dashboard stat cards."""

    generated_at: datetime.datetime
    total_leads: int
    total_calls: int
    success_rate: int = Field(ge=0, le=100)
    recent_calls: int
    chart_data: Tuple[ChartPoint, ...]
