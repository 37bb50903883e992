"""Alembic environment for the ledger schema.

The database URL comes from DATABASE_URL via badge_ledger.core.config,
the same source the running service reads.  Migration output goes
through the service's own log formatter.
"""

from __future__ import annotations

from sqlalchemy import create_engine, pool

import badge_ledger.db.tables  # noqa: F401  (registers ledger_entries)
from alembic import context
from badge_ledger.core.config import SETTINGS
from badge_ledger.core.logging import setup_logging
from badge_ledger.db.engine import Base

config = context.config
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

target_metadata = Base.metadata


def _database_url() -> str:
    url = SETTINGS.database_url or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("DATABASE_URL must be set to run ledger migrations")
    return url


def run_migrations_offline() -> None:
    """Emit the ledger DDL as SQL without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER most constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
