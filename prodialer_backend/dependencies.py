from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import Depends
from sqlalchemy.orm import Session

from prodialer_backend.config import settings
from prodialer_backend.db import get_db
from prodialer_backend.schemas.contact import Contact
from prodialer_backend.services.contacts import list_contacts
from prodialer_backend.services.time_window import current_instant


def get_report_now() -> datetime:
    """The request's single reading of the clock, in the report timezone."""
    return current_instant(settings.report_timezone)


def get_contacts(db: Session = Depends(get_db)) -> List[Contact]:
    return list_contacts(db)
