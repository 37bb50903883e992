from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity extracted from a validated JWT.

    ``user_id`` is the token subject and becomes the ledger caller.
    Roles are informational here: ledger capabilities come from the
    authorization registry, not from token claims.
    """

    user_id: str
    roles: frozenset[str]
