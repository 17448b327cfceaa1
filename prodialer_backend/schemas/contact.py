from __future__ import annotations

import datetime
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Fixed vocabularies used by the lead table. Aggregation tolerates values
# outside them; they are not enforced at validation time.
CONTACT_STATUSES = ("Interested", "Not Interested", "Call Again")
CONTACT_TAGS = ("Hot", "Cold", "Follow-up")


def ensure_aware(value: datetime.datetime) -> datetime.datetime:
    """Naive datetimes coming out of the store are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


class CamelModel(BaseModel):
    """Accepts document-store camelCase keys and snake_case names alike."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CallEvent(CamelModel):
    """One logged phone interaction against a contact."""

    model_config = ConfigDict(frozen=True)

    time: datetime.datetime
    duration_seconds: int = Field(default=0)
    outcome: str = Field(default="")

    @field_validator("time")
    @classmethod
    def time_is_aware(cls, v: datetime.datetime) -> datetime.datetime:
        return ensure_aware(v)

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def default_duration(cls, v: Any) -> int:
        if v is None or v == "":
            return 0
        try:
            seconds = float(v)
        except TypeError as exc:
            raise ValueError(f"durationSeconds must be a number, got {v!r}") from exc
        if not math.isfinite(seconds):
            raise ValueError(f"durationSeconds must be finite, got {v!r}")
        return max(0, int(seconds))

    @field_validator("outcome", mode="before")
    @classmethod
    def default_outcome(cls, v: Any) -> str:
        return "" if v is None else str(v)


class Contact(CamelModel):
    """
    A lead as read from the contact store.

    Missing collections default to empty and missing strings to "" so a
    partially filled document still aggregates.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    phone: str = ""
    email: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: str = ""
    call_history: List[CallEvent] = Field(default_factory=list)
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    @field_validator("name", "phone", "status", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v: Any) -> Optional[str]:
        if v is None or str(v).strip() == "":
            return None
        return str(v)

    @field_validator("tags", "call_history", mode="before")
    @classmethod
    def default_sequence(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_are_aware(
        cls, v: Optional[datetime.datetime]
    ) -> Optional[datetime.datetime]:
        return ensure_aware(v) if v is not None else None
