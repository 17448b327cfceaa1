from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger("prodialer.report_export")


class ReportExportError(RuntimeError):
    """Base exception for export failures (as opposed to aggregation failures)."""


class PdfRenderingUnavailable(ReportExportError):
    """Raised when WeasyPrint (or PDF rendering) is not available."""


class ExportWriteError(ReportExportError):
    """Raised when an export file cannot be written to its destination."""


def export_filename(product_slug: str, kind: str, range_code: str, ext: str) -> str:
    """
    Deterministic download name, e.g. ``prodialer-report-30d.pdf``.
    """
    return f"{product_slug}-{kind}-{range_code}.{ext.lstrip('.')}"


def write_export(directory: Path, filename: str, payload: Union[bytes, str]) -> Path:
    """
    Write an export payload under `directory`, creating it if needed.

    Text payloads are written as UTF-8. Any filesystem error surfaces as
    ExportWriteError.
    """
    output_path = Path(directory) / filename
    data = payload.encode("utf-8") if isinstance(payload, str) else payload

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as exc:
        logger.error("Failed to write export %s: %s", output_path, exc)
        raise ExportWriteError(f"Could not write {output_path}: {exc}") from exc

    logger.info("Export written to %s (%d bytes)", output_path, len(data))
    return output_path
