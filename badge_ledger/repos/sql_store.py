"""SQL implementation of KeyValueStore.

Satisfies the KeyValueStore Protocol using one ``ledger_entries`` table.
Each ledger transaction runs in a single SQLAlchemy session: reads go
through the session, staged writes are flushed and committed together at
the end of the ``with`` block, and any exception rolls the session back.

Reads inside a transaction take row locks (``SELECT ... FOR UPDATE``), so
commands from separate worker processes that read the same entry wait for
each other instead of acting on a stale balance.  The in-process lock only
orders the threads of one worker.  Two workers creating the same new key
collide on the primary key and the loser rolls back.  SQLite renders no
FOR UPDATE and relies on its database-wide write lock.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import Engine, Select, select
from sqlalchemy.orm import Session, sessionmaker

from badge_ledger.db.tables import LedgerEntryRow
from badge_ledger.models.badge import Badge
from badge_ledger.models.issuer import Admin, Issuer
from badge_ledger.models.ownership import OwnershipHistoryEntry
from badge_ledger.models.points import PointsAccount, PointsTotals, Redemption
from badge_ledger.models.reward import Reward
from badge_ledger.models.verification import VerificationRequest
from badge_ledger.repos.badge_repo import BADGE_HISTORY, BADGES
from badge_ledger.repos.counter_repo import COUNTERS
from badge_ledger.repos.issuer_repo import ADMINS, ISSUERS
from badge_ledger.repos.points_repo import POINTS_ACCOUNTS, POINTS_TOTALS, REDEMPTIONS
from badge_ledger.repos.reward_repo import REWARDS
from badge_ledger.repos.store import Key, Transaction
from badge_ledger.repos.verification_repo import VERIFICATION_REQUESTS

NAMESPACE_TYPES: dict[str, Any] = {
    ISSUERS: Issuer,
    ADMINS: Admin,
    BADGES: Badge,
    BADGE_HISTORY: OwnershipHistoryEntry,
    VERIFICATION_REQUESTS: VerificationRequest,
    POINTS_ACCOUNTS: PointsAccount,
    POINTS_TOTALS: PointsTotals,
    REDEMPTIONS: Redemption,
    REWARDS: Reward,
    COUNTERS: int,
}


def encode_key(key: Key) -> str:
    return json.dumps(list(key) if isinstance(key, tuple) else key)


def decode_key(raw: str) -> Key:
    value = json.loads(raw)
    return tuple(value) if isinstance(value, list) else value


class _ValueCodec:
    def __init__(self, types: Mapping[str, Any]) -> None:
        self._adapters = {ns: TypeAdapter(tp) for ns, tp in types.items()}

    def _adapter(self, namespace: str) -> TypeAdapter:
        try:
            return self._adapters[namespace]
        except KeyError:
            raise KeyError(f"unknown ledger namespace {namespace!r}") from None

    def encode(self, namespace: str, value: Any) -> Any:
        return self._adapter(namespace).dump_python(value, mode="json")

    def decode(self, namespace: str, raw: Any) -> Any:
        return self._adapter(namespace).validate_python(raw)


def entry_query(
    namespace: str, key: Key | None = None, *, for_update: bool = False
) -> Select:
    stmt = select(LedgerEntryRow).where(LedgerEntryRow.namespace == namespace)
    if key is not None:
        stmt = stmt.where(LedgerEntryRow.key == encode_key(key))
    if for_update:
        stmt = stmt.with_for_update()
    return stmt


class _SessionReader:
    def __init__(
        self, session: Session, codec: _ValueCodec, *, for_update: bool = False
    ) -> None:
        self._session = session
        self._codec = codec
        self._for_update = for_update

    def get(self, namespace: str, key: Key) -> Any | None:
        stmt = entry_query(namespace, key, for_update=self._for_update)
        row = self._session.scalars(stmt).first()
        if row is None:
            return None
        return self._codec.decode(namespace, row.value)

    def scan(self, namespace: str) -> list[tuple[Key, Any]]:
        stmt = entry_query(namespace, for_update=self._for_update)
        rows = self._session.scalars(stmt).all()
        return [
            (decode_key(row.key), self._codec.decode(namespace, row.value))
            for row in rows
        ]


class SqlKeyValueStore:
    """Satisfies the KeyValueStore Protocol using SQLAlchemy."""

    def __init__(
        self, engine: Engine, types: Mapping[str, Any] | None = None
    ) -> None:
        self._sessions = sessionmaker(engine, expire_on_commit=False)
        self._codec = _ValueCodec(types if types is not None else NAMESPACE_TYPES)
        self._lock = threading.Lock()

    def get(self, namespace: str, key: Key) -> Any | None:
        with self._sessions() as session:
            return _SessionReader(session, self._codec).get(namespace, key)

    def scan(self, namespace: str) -> list[tuple[Key, Any]]:
        with self._sessions() as session:
            return _SessionReader(session, self._codec).scan(namespace)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self._lock, self._sessions() as session:
            tx = Transaction(_SessionReader(session, self._codec, for_update=True))
            try:
                yield tx
                self._apply(session, tx.pending())
                session.commit()
            except Exception:
                session.rollback()
                raise

    def _apply(
        self, session: Session, writes: list[tuple[str, Key, Any | None]]
    ) -> None:
        for namespace, key, value in writes:
            pk = (namespace, encode_key(key))
            if value is None:
                row = session.get(LedgerEntryRow, pk)
                if row is not None:
                    session.delete(row)
                continue
            session.merge(
                LedgerEntryRow(
                    namespace=namespace,
                    key=pk[1],
                    value=self._codec.encode(namespace, value),
                )
            )
        session.flush()
