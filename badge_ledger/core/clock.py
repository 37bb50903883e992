"""Height sources.

The ledger never reads time itself.  The caller's environment reads a
Clock once per request and passes the value in a CallContext, so every
check inside one operation sees the same height.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class ManualClock:
    """Clock advanced explicitly.  Used by tests and replay tooling."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start height must be non-negative")
        self._height = start

    def now(self) -> int:
        return self._height

    def advance(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError("clock cannot move backwards")
        self._height += n
        return self._height

    def set(self, height: int) -> None:
        if height < self._height:
            raise ValueError(
                f"clock cannot move backwards (current={self._height}, got={height})"
            )
        self._height = height


class SystemClock:
    """Unix seconds, clamped so successive reads never decrease."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last
