"""SQLAlchemy table definitions.

The ledger persists every namespace of its key-value store in a single
table.  Keys and values are JSON-encoded by SqlKeyValueStore; the domain
dataclasses in badge_ledger/models/ never see rows.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from badge_ledger.db.engine import Base


class LedgerEntryRow(Base):
    __tablename__ = "ledger_entries"

    namespace: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
