"""Database session configuration.

The engine is built on first use so that a missing ``DATABASE_URL`` is
reported per request instead of failing at import time.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from download_gate.core.errors import ConfigurationError
from download_gate.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import download_gate.models  # noqa: E402,F401


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine for the configured database."""
    url = settings.effective_database_url
    if not url:
        raise ConfigurationError(missing=["DATABASE_URL"])
    return create_engine(url, pool_pre_ping=True, echo=settings.sql_debug)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Return the session factory; each store call opens and closes its own session."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=get_engine())


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=get_engine())
