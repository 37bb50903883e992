from __future__ import annotations

from badge_ledger.models.points import PointsAccount, PointsTotals, Redemption
from badge_ledger.repos.counter_repo import CounterRepo
from badge_ledger.repos.store import Transaction

POINTS_ACCOUNTS = "points_accounts"
POINTS_TOTALS = "points_totals"
REDEMPTIONS = "redemptions"

_GLOBAL = "global"


class PointsRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx
        self._counters = CounterRepo(tx)

    def get(self, identity: str) -> PointsAccount:
        account = self._tx.get(POINTS_ACCOUNTS, identity)
        return account if account is not None else PointsAccount.empty(identity)

    def put(self, account: PointsAccount) -> None:
        if account.balance < 0:
            raise ValueError(f"negative balance for {account.identity!r}")
        self._tx.put(POINTS_ACCOUNTS, account.identity, account)

    def list_accounts(self) -> list[PointsAccount]:
        return [a for _, a in self._tx.scan(POINTS_ACCOUNTS)]

    def totals(self) -> PointsTotals:
        totals = self._tx.get(POINTS_TOTALS, _GLOBAL)
        return totals if totals is not None else PointsTotals()

    def put_totals(self, totals: PointsTotals) -> None:
        self._tx.put(POINTS_TOTALS, _GLOBAL, totals)

    def append_redemption(
        self, *, user: str, reward_id: int, points_spent: int, timestamp: int
    ) -> Redemption:
        sequence = self._counters.next((REDEMPTIONS, user))
        redemption = Redemption(
            user=user,
            sequence=sequence,
            reward_id=reward_id,
            points_spent=points_spent,
            timestamp=timestamp,
        )
        if not self._tx.put_if_absent(REDEMPTIONS, (user, sequence), redemption):
            raise RuntimeError(f"redemption ({user!r}, {sequence}) already exists")
        return redemption

    def redemptions_for(self, user: str) -> list[Redemption]:
        count = self._counters.current((REDEMPTIONS, user))
        found = [self._tx.get(REDEMPTIONS, (user, seq)) for seq in range(1, count + 1)]
        return [r for r in found if r is not None]
