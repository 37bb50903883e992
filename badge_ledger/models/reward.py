from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Reward:
    id: int
    name: str
    description: str
    cost: int
    available_quantity: int
    active: bool
    created_by: str
    created_at: int

    @property
    def in_stock(self) -> bool:
        return self.available_quantity > 0
