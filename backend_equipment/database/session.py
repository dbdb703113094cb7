"""
Engine and session management — SQLAlchemy-backed.

Uses EQUIPMENT_DB_URL / DATABASE_URL when set; otherwise falls back to SQLite
(DATABASE_PATH or equipment.db). Engine and session factory are created lazily
and cached for the process.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from backend_equipment.config.env import get_database_url, mask_database_url
from backend_equipment.database.tables import Base
from backend_equipment.equipment_logging import get_logger

logger = get_logger(__name__)

_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create or return cached engine. Thread-safe for typical FastAPI/worker usage."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        logger.info("database_engine_created", url=mask_database_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    """Return session factory bound to engine."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=_get_engine(),
        )
    return _SessionLocal


@contextmanager
def session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    factory = _get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """
    Create tables if they do not exist.
    Uses SQLAlchemy Base.metadata.create_all. Safe to call on every startup.
    """
    try:
        engine = _get_engine()
        Base.metadata.create_all(bind=engine)
        logger.info("database_init_db", url=mask_database_url(get_database_url()))
    except Exception as e:
        logger.exception("database_init_db_failed", error=str(e))
        raise


def reset_engine_for_test() -> None:
    """
    Dispose and clear cached engine and session factory. For tests only; use with a new DATABASE_PATH.
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
