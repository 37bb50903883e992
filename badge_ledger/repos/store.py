"""Transactional key-value store boundary.

The ledger keeps all of its state in namespaced maps behind a
KeyValueStore.  Every public ledger operation runs inside exactly one
``store.transaction()`` block:

    with store.transaction() as tx:
        badge = BadgeRepo(tx).get(badge_id)      # reads see staged writes
        ...validate everything...
        BadgeRepo(tx).put(updated)               # staged, not yet visible

Writes are staged on the Transaction and applied together when the block
exits cleanly.  If the block raises, the staged writes are discarded and
the store is untouched.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Protocol

Key = Hashable

_MISSING = object()
_DELETED = object()


class KeyValueReader(Protocol):
    def get(self, namespace: str, key: Key) -> Any | None: ...
    def scan(self, namespace: str) -> list[tuple[Key, Any]]: ...


class KeyValueStore(KeyValueReader, Protocol):
    def transaction(self) -> AbstractContextManager[Transaction]: ...


class Transaction:
    """Staged write set layered over a committed snapshot."""

    def __init__(self, reader: KeyValueReader) -> None:
        self._reader = reader
        self._writes: dict[tuple[str, Key], Any] = {}

    def get(self, namespace: str, key: Key) -> Any | None:
        staged = self._writes.get((namespace, key), _MISSING)
        if staged is _DELETED:
            return None
        if staged is not _MISSING:
            return staged
        return self._reader.get(namespace, key)

    def scan(self, namespace: str) -> list[tuple[Key, Any]]:
        merged = dict(self._reader.scan(namespace))
        for (ns, key), value in self._writes.items():
            if ns != namespace:
                continue
            if value is _DELETED:
                merged.pop(key, None)
            else:
                merged[key] = value
        # Keys of one namespace share a type, except in the counters map.
        return sorted(merged.items(), key=lambda item: (type(item[0]).__name__, item[0]))

    def put(self, namespace: str, key: Key, value: Any) -> None:
        if value is None:
            raise ValueError("use delete() to remove a key")
        self._writes[(namespace, key)] = value

    def put_if_absent(self, namespace: str, key: Key, value: Any) -> bool:
        if self.get(namespace, key) is not None:
            return False
        self.put(namespace, key, value)
        return True

    def delete(self, namespace: str, key: Key) -> None:
        self._writes[(namespace, key)] = _DELETED

    def pending(self) -> list[tuple[str, Key, Any | None]]:
        """Staged writes in staging order; a value of None means delete."""
        return [
            (ns, key, None if value is _DELETED else value)
            for (ns, key), value in self._writes.items()
        ]

    def __len__(self) -> int:
        return len(self._writes)


class InMemoryKeyValueStore:
    """Dict-backed store.  Transactions are serialized by a lock."""

    def __init__(self) -> None:
        self._data: dict[str, dict[Key, Any]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: Key) -> Any | None:
        return self._data.get(namespace, {}).get(key)

    def scan(self, namespace: str) -> list[tuple[Key, Any]]:
        return list(self._data.get(namespace, {}).items())

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self._lock:
            tx = Transaction(self)
            yield tx
            self._apply(tx.pending())

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def _apply(self, writes: list[tuple[str, Key, Any | None]]) -> None:
        for namespace, key, value in writes:
            bucket = self._data.setdefault(namespace, {})
            if value is None:
                bucket.pop(key, None)
            else:
                bucket[key] = value
