from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, tzinfo
from typing import Final, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from prodialer_backend.schemas.contact import Contact, ensure_aware

logger = logging.getLogger("prodialer.report_csv")

# Column order is part of the export contract; consumers may read by position.
CSV_COLUMNS: Final[Tuple[str, ...]] = (
    "Name",
    "Phone",
    "Email",
    "Tags",
    "Status",
    "TotalCalls",
    "CreatedAt",
    "UpdatedAt",
)

TAG_SEPARATOR: Final[str] = ", "


def format_short_date(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """M/D/YYYY in the report calendar, "" when missing."""
    if value is None:
        return ""
    local = ensure_aware(value).astimezone(tz) if tz is not None else value
    return f"{local.month}/{local.day}/{local.year}"


def contact_row(contact: Contact, tz: Optional[tzinfo] = None) -> List[str]:
    return [
        contact.name,
        contact.phone,
        contact.email or "",
        TAG_SEPARATOR.join(contact.tags),
        contact.status,
        str(len(contact.call_history)),
        format_short_date(contact.created_at, tz),
        format_short_date(contact.updated_at, tz),
    ]


def contacts_to_csv(contacts: Sequence[Contact], tz_name: Optional[str] = None) -> str:
    """
    Serialize the lead roster, one row per contact.

    TotalCalls is the full call-history length, not limited to any report
    window. Quoting follows the csv module's minimal rules, so embedded
    commas, quotes and newlines survive a parse.
    """
    tz = ZoneInfo(tz_name) if tz_name else None

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(CSV_COLUMNS)
    for contact in contacts:
        writer.writerow(contact_row(contact, tz))

    logger.debug("Serialized %d contacts to CSV", len(contacts))
    return buffer.getvalue()
