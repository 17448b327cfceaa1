from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from prodialer_backend.config import settings
from prodialer_backend.db import SessionLocal
from prodialer_backend.logging_config import configure_logging
from prodialer_backend.schemas.contact import Contact
from prodialer_backend.services.contacts import list_contacts
from prodialer_backend.services.report_csv import contacts_to_csv
from prodialer_backend.services.report_export import (
    ReportExportError,
    export_filename,
    write_export,
)
from prodialer_backend.services.report_pdf import export_report_pdf
from prodialer_backend.services.report_service import build_report
from prodialer_backend.services.time_window import (
    DEFAULT_RANGE,
    RANGE_DAYS,
    current_instant,
)

logger = logging.getLogger("prodialer.report.job")

FORMATS = ("csv", "pdf", "both")


def export_reports(
    contacts: Sequence[Contact],
    range_code: str,
    output_dir: Path,
    now: datetime,
    fmt: str = "both",
) -> List[Path]:
    """
    Build one snapshot and write the requested export files.

    Raises ReportExportError when rendering or writing fails.
    """
    written: List[Path] = []

    if fmt in ("csv", "both"):
        csv_body = contacts_to_csv(contacts, tz_name=settings.report_timezone)
        filename = export_filename(settings.product_slug, "leads", range_code, "csv")
        written.append(write_export(output_dir, filename, csv_body))

    if fmt in ("pdf", "both"):
        snapshot = build_report(contacts, range_code, now)
        pdf_bytes = export_report_pdf(snapshot, snapshot.range_code, settings.product_name)
        filename = export_filename(settings.product_slug, "report", snapshot.range_code, "pdf")
        written.append(write_export(output_dir, filename, pdf_bytes))

    return written


def run_export(range_code: str, fmt: str, output_dir: Path) -> int:
    db: Session = SessionLocal()
    try:
        contacts = list_contacts(db)
        now = current_instant(settings.report_timezone)
        paths = export_reports(contacts, range_code, output_dir, now, fmt)
        for path in paths:
            logger.info("Report export stored at %s", path)
        return 0
    except ReportExportError as exc:
        logger.error("Report export failed: %s", exc)
        return 1
    finally:
        db.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export the ProDialer lead roster (CSV) and analytics report (PDF)."
    )
    parser.add_argument(
        "--range",
        dest="range_code",
        choices=sorted(RANGE_DAYS),
        default=DEFAULT_RANGE,
        help="Report window.",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        choices=FORMATS,
        default="both",
        help="Which files to write.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=settings.export_dir,
        help="Directory for the exported files.",
    )
    args = parser.parse_args(argv)

    configure_logging()

    return run_export(args.range_code, args.fmt, args.output_dir)


if __name__ == "__main__":
    raise SystemExit(main())
