from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OwnershipHistoryEntry:
    """Append-only transfer record, keyed by (badge_id, sequence)."""

    badge_id: int
    sequence: int
    previous_owner: str
    new_owner: str
    transferred_at: int
