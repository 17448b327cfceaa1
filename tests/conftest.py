"""Pytest configuration and fixtures for the ProDialer backend tests."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest

# Set test environment before any prodialer_backend import reads settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REPORT_TIMEZONE"] = "UTC"
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from prodialer_backend.db import Base, get_db  # noqa: E402
from prodialer_backend.schemas.contact import Contact  # noqa: E402

# Frozen "now" shared by every test: Monday 19 Oct 2026, 15:00 UTC.
NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)

_ids = count(1)


def call(
    days_ago: float = 0,
    duration: Optional[int] = 45,
    outcome: str = "Answered",
    now: datetime = NOW,
) -> Dict[str, Any]:
    """A raw call event dict, as stored in the contact document."""
    event: Dict[str, Any] = {
        "time": now - timedelta(days=days_ago),
        "outcome": outcome,
    }
    if duration is not None:
        event["durationSeconds"] = duration
    return event


def make_contact(
    name: Optional[str] = None,
    calls: Optional[List[Dict[str, Any]]] = None,
    tags: Optional[List[str]] = None,
    status: str = "Interested",
    **extra: Any,
) -> Contact:
    n = next(_ids)
    data: Dict[str, Any] = {
        "id": f"contact-{n}",
        "name": name if name is not None else f"Lead {n}",
        "phone": f"+1555000{n:04d}",
        "tags": tags if tags is not None else ["Hot"],
        "status": status,
        "callHistory": calls or [],
    }
    data.update(extra)
    return Contact.model_validate(data)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def contact_factory() -> Callable[..., Contact]:
    return make_contact


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """In-memory SQLite session with the full schema created."""
    import prodialer_backend.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """App client wired to the test session and the frozen clock."""
    from prodialer_backend.dependencies import get_report_now
    from prodialer_backend.main import app

    def _override_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_report_now] = lambda: NOW
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
