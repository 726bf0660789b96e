"""Database session configuration."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from chetana.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import chetana.models  # noqa: E402,F401


def _engine_options() -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["pool_timeout"] = settings.db_pool_timeout_seconds
    return options


engine = create_engine(settings.database_url, **_engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def open_session(
    factory: sessionmaker[Session] = SessionLocal,
    *,
    attempts: int | None = None,
    backoff_seconds: float | None = None,
) -> Session:
    """Open a session whose connection has been acquired from the pool.

    Transient acquisition failures are retried a fixed number of times with a
    linear backoff; the last failure is re-raised.
    """
    attempts = max(1, attempts or settings.db_connect_attempts)
    backoff = settings.db_connect_backoff_seconds if backoff_seconds is None else backoff_seconds

    for attempt in range(1, attempts + 1):
        db = factory()
        try:
            db.connection()
            return db
        except OperationalError:
            db.close()
            if attempt == attempts:
                logger.error("Database connection failed after %d attempts", attempts)
                raise
            logger.warning(
                "Database connection attempt %d/%d failed; retrying", attempt, attempts
            )
            time.sleep(backoff * attempt)

    raise RuntimeError("unreachable")  # pragma: no cover


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = open_session()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block as one transaction: commit on success, roll back on any error."""
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database transaction failed; rolled back")
        raise
    except Exception:
        db.rollback()
        raise
