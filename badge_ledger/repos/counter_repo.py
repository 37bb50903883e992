from __future__ import annotations

from badge_ledger.repos.store import Key, Transaction

COUNTERS = "counters"


class CounterRepo:
    """Monotonic counters.  Values are never decremented or reused."""

    def __init__(self, tx: Transaction) -> None:
        self._tx = tx

    def current(self, name: Key) -> int:
        return self._tx.get(COUNTERS, name) or 0

    def next(self, name: Key) -> int:
        value = self.current(name) + 1
        self._tx.put(COUNTERS, name, value)
        return value
