from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PointsAccount:
    """Per-identity balance and activity statistics.

    Created lazily on the first award or incoming transfer; a missing
    account reads as ``PointsAccount.empty(identity)``.
    """

    identity: str
    balance: int = 0
    total_earned: int = 0
    total_spent: int = 0
    rewards_redeemed: int = 0
    last_activity: int | None = None

    @staticmethod
    def empty(identity: str) -> PointsAccount:
        return PointsAccount(identity=identity)


@dataclass(frozen=True, slots=True)
class Redemption:
    """Append-only record of one reward unit exchanged for points."""

    user: str
    sequence: int
    reward_id: int
    points_spent: int
    timestamp: int


@dataclass(frozen=True, slots=True)
class PointsTotals:
    """Global counters.  Balances always sum to ``circulating``."""

    issued: int = 0
    deducted: int = 0
    redeemed: int = 0

    @property
    def circulating(self) -> int:
        return self.issued - self.deducted - self.redeemed
