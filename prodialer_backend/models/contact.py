import datetime

from sqlalchemy import Column, DateTime, String, JSON, Index

from prodialer_backend.db import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ContactRecord(Base):
    """Stored contact document: one lead plus its embedded call log."""

    __tablename__ = "contacts"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False, default="")
    phone = Column(String(64), index=True, nullable=False, default="")
    email = Column(String(255), index=True, nullable=True)
    tags = Column(JSON, nullable=True)
    status = Column(String(32), index=True, nullable=False, default="")
    # Raw call events as stored: {"time": ISO-8601, "durationSeconds": int, "outcome": str}
    call_history = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=True, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=True,
    )

    __table_args__ = (
        Index("ix_contacts_status_created", "status", "created_at"),
    )
