from __future__ import annotations

import logging
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from prodialer_backend.config import settings

logger = logging.getLogger("prodialer.db")

Base = declarative_base()


def _contact_store_url(raw_url: str) -> URL:
    """Parse DATABASE_URL; the contact store cannot start without one."""
    if not raw_url or not raw_url.strip():
        raise RuntimeError("DATABASE_URL is empty; the contact store needs a database.")

    try:
        url = make_url(raw_url)
    except ArgumentError as exc:
        raise RuntimeError(f"DATABASE_URL is not a SQLAlchemy URL: {raw_url!r}") from exc

    logger.info("Contact store: %s", url.render_as_string(hide_password=True))
    return url


def _engine_options(url: URL) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        # Request handlers run in FastAPI's threadpool.
        options["connect_args"] = {"check_same_thread": False}
    return options


def _create_engine() -> Engine:
    url = _contact_store_url(settings.database_url)
    try:
        return create_engine(url, **_engine_options(url))
    except SQLAlchemyError:
        logger.exception("Could not create the contact store engine")
        raise


engine: Engine = _create_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, class_=Session)


def get_db() -> Generator[Session, None, None]:
    """
    Request-scoped session: committed when the handler returns, rolled back
    and re-raised when it fails.
    """
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        logger.exception("Rolling back contact store session")
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create the contacts table if it does not exist yet."""
    import prodialer_backend.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception("Could not create the contact store schema")
        raise
    logger.info("Contact store schema ready")
