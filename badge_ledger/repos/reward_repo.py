from __future__ import annotations

from badge_ledger.models.reward import Reward
from badge_ledger.repos.counter_repo import CounterRepo
from badge_ledger.repos.store import Transaction

REWARDS = "rewards"

_REWARD_ID = "reward_id"


class RewardRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx
        self._counters = CounterRepo(tx)

    def get(self, reward_id: int) -> Reward | None:
        return self._tx.get(REWARDS, reward_id)

    def put(self, reward: Reward) -> None:
        if reward.available_quantity < 0:
            raise ValueError(f"negative inventory for reward {reward.id}")
        self._tx.put(REWARDS, reward.id, reward)

    def next_id(self) -> int:
        return self._counters.next(_REWARD_ID)

    def list_all(self) -> list[Reward]:
        return [r for _, r in self._tx.scan(REWARDS)]
