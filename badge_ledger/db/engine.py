"""SQLAlchemy engine and session factory.

When DATABASE_URL is configured, provides a synchronous engine and a
session factory for the SQL-backed ledger store.  Ledger operations are
short and never suspend, so a plain (non-async) engine is used.

When DATABASE_URL is None, ``engine`` is None and the app falls back to
the in-memory store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from badge_ledger.core.config import SETTINGS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


def create_ledger_engine(url: str, *, echo: bool = False) -> Engine:
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory DB.
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_size=5, max_overflow=10)


def create_tables(bind: Engine) -> None:
    import badge_ledger.db.tables  # noqa: F401

    Base.metadata.create_all(bind)


engine = (
    create_ledger_engine(SETTINGS.database_url, echo=SETTINGS.is_dev)
    if SETTINGS.database_url
    else None
)


@contextmanager
def lifespan_db() -> Iterator[None]:
    """Startup/shutdown hook for the database engine."""
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory ledger store")
        yield
        return

    if not SETTINGS.is_prod:
        # Prod schemas are managed by alembic migrations only.
        create_tables(engine)
    logger.info("Database engine created: %s", engine.url)
    yield
    engine.dispose()
    logger.info("Database engine disposed")
