from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Central configuration for the ProDialer admin backend.

    - Reads from .env (local) and process environment.
    - Ignores extra env vars so adding new ones doesn’t break startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core app
    # -------------------------------------------------------------------------
    app_name: str = Field(default="ProDialer Admin Backend", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    environment: str = Field(default="local", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # -------------------------------------------------------------------------
    # Database (contact document store)
    # -------------------------------------------------------------------------
    database_url: str = Field(default="sqlite:///./prodialer.db", alias="DATABASE_URL")

    # -------------------------------------------------------------------------
    # Reports + exports
    # -------------------------------------------------------------------------
    product_name: str = Field(default="ProDialer", alias="PRODUCT_NAME")
    product_slug: str = Field(default="prodialer", alias="PRODUCT_SLUG")

    # Calendar used for chart day bins and exported date strings.
    report_timezone: str = Field(default="UTC", alias="REPORT_TIMEZONE")

    export_dir: Path = Field(default=Path("./exports"), alias="EXPORT_DIR")

    @field_validator("report_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"REPORT_TIMEZONE '{v}' is not a known IANA timezone") from exc
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader so config is evaluated once per process.
    """
    settings = Settings()
    logger.info(
        "Settings loaded (env=%s, debug=%s, report_tz=%s)",
        settings.environment,
        settings.debug,
        settings.report_timezone,
    )
    return settings


# Singleton used everywhere else
settings: Settings = get_settings()
