from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallContext:
    """Who is calling and at what height.

    Built once per request by the environment and passed explicitly to
    every ledger operation.  The ledger compares ``caller`` for equality
    only; it never authenticates it.
    """

    caller: str
    height: int
