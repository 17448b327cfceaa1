from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from prodialer_backend.schemas.report import ReportSnapshot
from prodialer_backend.services.report_document import (
    CELL_PADDING,
    ReportDocument,
    build_report_document,
)
from prodialer_backend.services.report_export import PdfRenderingUnavailable

logger = logging.getLogger("prodialer.report_pdf")

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
REPORT_TEMPLATE = "report_document.html"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)
_env.filters["mm"] = lambda value: f"{float(value):.2f}mm"


def _load_html_class() -> Any:
    """Import WeasyPrint lazily; it needs native Pango/Cairo libraries at import time."""
    from weasyprint import HTML  # type: ignore

    return HTML


def render_document_html(document: ReportDocument) -> str:
    """
    Render a laid-out document as fixed-size HTML pages with absolutely
    positioned blocks.
    """
    template = _env.get_template(REPORT_TEMPLATE)
    return template.render(document=document, cell_padding=CELL_PADDING)


def generate_pdf_from_html(html: str, title: Optional[str] = None) -> bytes:
    """
    Convert an HTML string into a PDF byte stream using WeasyPrint.

    Raises PdfRenderingUnavailable if WeasyPrint is not installed or fails.
    """
    try:
        html_class = _load_html_class()
    except (ImportError, OSError) as exc:
        logger.error(
            "WeasyPrint is not available (%s). Install with: pip install weasyprint", exc
        )
        raise PdfRenderingUnavailable(
            "PDF rendering is not available. Install 'weasyprint' to enable it."
        ) from exc

    try:
        doc = html_class(string=html, base_url=".")
        pdf_bytes: bytes = doc.write_pdf()
    except Exception as exc:
        logger.exception("Failed to generate PDF %r from HTML", title)
        raise PdfRenderingUnavailable(f"PDF rendering failed: {exc!r}") from exc

    return pdf_bytes


def export_report_pdf(
    snapshot: ReportSnapshot,
    range_code: Optional[str] = None,
    product_name: str = "ProDialer",
) -> bytes:
    """Lay out, render and encode the analytics report."""
    document = build_report_document(snapshot, range_code, product_name)
    html = render_document_html(document)
    pdf_bytes = generate_pdf_from_html(html, title=document.title)
    logger.info(
        "Generated report PDF (range=%s, pages=%d, bytes=%d)",
        range_code or snapshot.range_code,
        len(document.pages),
        len(pdf_bytes),
    )
    return pdf_bytes
