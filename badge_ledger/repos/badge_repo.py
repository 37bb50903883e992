from __future__ import annotations

from badge_ledger.models.badge import Badge
from badge_ledger.models.ownership import OwnershipHistoryEntry
from badge_ledger.repos.counter_repo import CounterRepo
from badge_ledger.repos.store import Transaction

BADGES = "badges"
BADGE_HISTORY = "badge_history"

_BADGE_ID = "badge_id"


class BadgeRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx
        self._counters = CounterRepo(tx)

    def get(self, badge_id: int) -> Badge | None:
        return self._tx.get(BADGES, badge_id)

    def put(self, badge: Badge) -> None:
        self._tx.put(BADGES, badge.id, badge)

    def next_id(self) -> int:
        return self._counters.next(_BADGE_ID)

    def count(self) -> int:
        return self._counters.current(_BADGE_ID)


class HistoryRepo:
    """Append-only ownership history keyed by (badge_id, sequence)."""

    def __init__(self, tx: Transaction) -> None:
        self._tx = tx
        self._counters = CounterRepo(tx)

    def append(
        self,
        *,
        badge_id: int,
        previous_owner: str,
        new_owner: str,
        transferred_at: int,
    ) -> OwnershipHistoryEntry:
        sequence = self._counters.next((BADGE_HISTORY, badge_id))
        entry = OwnershipHistoryEntry(
            badge_id=badge_id,
            sequence=sequence,
            previous_owner=previous_owner,
            new_owner=new_owner,
            transferred_at=transferred_at,
        )
        if not self._tx.put_if_absent(BADGE_HISTORY, (badge_id, sequence), entry):
            raise RuntimeError(
                f"history entry ({badge_id}, {sequence}) already exists"
            )
        return entry

    def count(self, badge_id: int) -> int:
        return self._counters.current((BADGE_HISTORY, badge_id))

    def list_for(self, badge_id: int) -> list[OwnershipHistoryEntry]:
        entries = [
            self._tx.get(BADGE_HISTORY, (badge_id, seq))
            for seq in range(1, self.count(badge_id) + 1)
        ]
        return [e for e in entries if e is not None]
