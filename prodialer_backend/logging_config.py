from __future__ import annotations

import logging
from typing import Optional

from prodialer_backend.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install the process-wide log format. Call once, before the app or a job starts.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
