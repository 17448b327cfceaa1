from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends

from prodialer_backend.dependencies import get_contacts, get_report_now
from prodialer_backend.schemas.contact import Contact
from prodialer_backend.schemas.report import DashboardSummary
from prodialer_backend.services.report_service import compute_dashboard_summary

logger = logging.getLogger("prodialer.admin_dashboard.router")

router = APIRouter(prefix="/admin/dashboard", tags=["Admin → Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def admin_dashboard_summary(
    contacts: List[Contact] = Depends(get_contacts),
    now: datetime = Depends(get_report_now),
) -> DashboardSummary:
    """
    Command center stat cards: leads, lifetime calls, success rate,
    calls in the last week, plus the 7-day chart.
    """
    summary = compute_dashboard_summary(contacts, now)
    logger.debug(
        "Dashboard summary (leads=%d, calls=%d, recent=%d)",
        summary.total_leads,
        summary.total_calls,
        summary.recent_calls,
    )
    return summary
