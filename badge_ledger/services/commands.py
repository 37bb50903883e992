from __future__ import annotations

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from badge_ledger.core.errors import LedgerError
from badge_ledger.core.metrics import LEDGER_COMMANDS

P = ParamSpec("P")
R = TypeVar("R")


def ledger_command(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Count every call of a ledger command by outcome.

    Outcome is "ok" on success or the LedgerError kind on rejection.
    Errors are re-raised unchanged.
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                result = fn(*args, **kwargs)
            except LedgerError as e:
                LEDGER_COMMANDS.labels(operation=operation, outcome=e.kind).inc()
                raise
            LEDGER_COMMANDS.labels(operation=operation, outcome="ok").inc()
            return result

        return wrapper

    return decorator
