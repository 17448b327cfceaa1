from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse

from prodialer_backend.config import settings
from prodialer_backend.dependencies import get_contacts, get_report_now
from prodialer_backend.schemas.contact import Contact
from prodialer_backend.schemas.report import ReportSnapshot
from prodialer_backend.services.report_csv import contacts_to_csv
from prodialer_backend.services.report_export import ReportExportError, export_filename
from prodialer_backend.services.report_pdf import export_report_pdf
from prodialer_backend.services.report_service import build_report
from prodialer_backend.services.time_window import DEFAULT_RANGE, normalize_range_code

logger = logging.getLogger("prodialer.admin_reports.router")

router = APIRouter(prefix="/admin/reports", tags=["Admin Reports"])

RANGE_DESCRIPTION = "Report window: 7d, 30d or 90d. Anything else falls back to 7d."


def _attachment_headers(filename: str, download: bool = True) -> dict:
    disposition = "attachment" if download else "inline"
    return {"Content-Disposition": f'{disposition}; filename="{filename}"'}


@router.get("/summary", response_model=ReportSnapshot)
def admin_report_summary(
    range_code: Optional[str] = Query(DEFAULT_RANGE, alias="range", description=RANGE_DESCRIPTION),
    contacts: List[Contact] = Depends(get_contacts),
    now: datetime = Depends(get_report_now),
) -> ReportSnapshot:
    """
    Report cards, breakdowns, activity feed and chart for the selected window.
    """
    return build_report(contacts, range_code, now)


@router.get("/export.csv")
def admin_report_csv(
    range_code: Optional[str] = Query(DEFAULT_RANGE, alias="range", description=RANGE_DESCRIPTION),
    contacts: List[Contact] = Depends(get_contacts),
) -> Response:
    """
    Lead roster as CSV, one row per contact.

    The range only names the file; the roster is never windowed.
    """
    code = normalize_range_code(range_code)
    body = contacts_to_csv(contacts, tz_name=settings.report_timezone)
    filename = export_filename(settings.product_slug, "leads", code, "csv")

    logger.info("CSV export requested (range=%s, contacts=%d)", code, len(contacts))
    return Response(
        content=body.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers=_attachment_headers(filename),
    )


@router.get("/export.pdf")
def admin_report_pdf(
    range_code: Optional[str] = Query(DEFAULT_RANGE, alias="range", description=RANGE_DESCRIPTION),
    download: bool = Query(
        True,
        description="If true, force download. If false, render inline.",
    ),
    contacts: List[Contact] = Depends(get_contacts),
    now: datetime = Depends(get_report_now),
) -> StreamingResponse:
    """
    Return a PDF rendition of the report for the selected window.

    - If `download=true`, Content-Disposition: attachment
    - Else, Content-Disposition: inline
    """
    snapshot = build_report(contacts, range_code, now)

    try:
        pdf_bytes = export_report_pdf(snapshot, snapshot.range_code, settings.product_name)
    except ReportExportError as exc:
        raise HTTPException(
            status_code=500,
            detail=str(exc),
        ) from exc

    filename = export_filename(settings.product_slug, "report", snapshot.range_code, "pdf")
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers=_attachment_headers(filename, download),
    )
