"""Reward catalog and redemption.

A redemption debits the caller's points, takes one unit of inventory,
and appends a redemption record.  All three are staged in one store
transaction, so either all land or none do.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from badge_ledger.core.errors import (
    InsufficientBalanceError,
    NotFoundError,
    RewardUnavailableError,
    UnauthorizedError,
)
from badge_ledger.core.metrics import POINTS_MOVED
from badge_ledger.models.context import CallContext
from badge_ledger.models.points import Redemption
from badge_ledger.models.reward import Reward
from badge_ledger.repos.points_repo import PointsRepo
from badge_ledger.repos.reward_repo import RewardRepo
from badge_ledger.repos.store import KeyValueStore, Transaction
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.commands import ledger_command
from badge_ledger.services.validation import (
    MAX_DESCRIPTION_LEN,
    MAX_NAME_LEN,
    require_positive,
    require_text,
)

logger = logging.getLogger(__name__)


class RewardsService:
    def __init__(
        self, store: KeyValueStore, authorization: AuthorizationService
    ) -> None:
        self._store = store
        self._auth = authorization

    def _require_curator(self, tx: Transaction, ctx: CallContext, action: str) -> None:
        """Admins and currently authorized issuers manage the catalog."""
        if self._auth.admin_in(tx, ctx.caller) or self._auth.issuer_authorized_in(
            tx, ctx.caller
        ):
            return
        logger.warning("Access denied: caller=%s may not %s", ctx.caller, action)
        raise UnauthorizedError(f"caller may not {action}")

    def _load(self, tx: Transaction, reward_id: int) -> Reward:
        reward = RewardRepo(tx).get(reward_id)
        if reward is None:
            logger.warning("Reward not found id=%s", reward_id)
            raise NotFoundError(f"reward {reward_id} not found")
        return reward

    # ------------------------------------------------------------------
    # Catalog commands
    # ------------------------------------------------------------------

    @ledger_command("create_reward")
    def create_reward(
        self,
        ctx: CallContext,
        *,
        name: str,
        description: str,
        cost: int,
        quantity: int,
    ) -> Reward:
        require_text(name, "name", max_len=MAX_NAME_LEN)
        require_text(
            description, "description", max_len=MAX_DESCRIPTION_LEN, allow_empty=True
        )
        require_positive(cost, "cost")
        require_positive(quantity, "quantity")

        with self._store.transaction() as tx:
            self._require_curator(tx, ctx, "create rewards")
            repo = RewardRepo(tx)
            reward = Reward(
                id=repo.next_id(),
                name=name,
                description=description,
                cost=cost,
                available_quantity=quantity,
                active=True,
                created_by=ctx.caller,
                created_at=ctx.height,
            )
            repo.put(reward)

        logger.info(
            "Created reward id=%d name=%s cost=%d quantity=%d",
            reward.id,
            name,
            cost,
            quantity,
        )
        return reward

    @ledger_command("set_reward_active")
    def set_active(self, ctx: CallContext, reward_id: int, active: bool) -> Reward:
        with self._store.transaction() as tx:
            self._require_curator(tx, ctx, "change rewards")
            reward = self._load(tx, reward_id)
            updated = replace(reward, active=active)
            if updated != reward:
                RewardRepo(tx).put(updated)

        logger.info("Set reward id=%d active=%s", reward_id, active)
        return updated

    @ledger_command("restock_reward")
    def restock(self, ctx: CallContext, reward_id: int, quantity: int) -> Reward:
        require_positive(quantity, "quantity")

        with self._store.transaction() as tx:
            self._require_curator(tx, ctx, "restock rewards")
            reward = self._load(tx, reward_id)
            updated = replace(
                reward, available_quantity=reward.available_quantity + quantity
            )
            RewardRepo(tx).put(updated)

        logger.info(
            "Restocked reward id=%d by %d (now %d)",
            reward_id,
            quantity,
            updated.available_quantity,
        )
        return updated

    # ------------------------------------------------------------------
    # Redemption
    # ------------------------------------------------------------------

    @ledger_command("redeem_reward")
    def redeem(self, ctx: CallContext, reward_id: int) -> Redemption:
        """Exchange the caller's points for one unit of a reward.

        Checked in order, first failure wins: reward exists, reward is
        active, inventory remains, caller balance covers the cost.
        """
        with self._store.transaction() as tx:
            reward = self._load(tx, reward_id)
            if not reward.active:
                logger.warning("Redeem rejected: reward id=%d inactive", reward_id)
                raise RewardUnavailableError(f"reward {reward_id} is not active")
            if not reward.in_stock:
                logger.warning("Redeem rejected: reward id=%d sold out", reward_id)
                raise RewardUnavailableError(f"reward {reward_id} is out of stock")

            points = PointsRepo(tx)
            account = points.get(ctx.caller)
            if account.balance < reward.cost:
                logger.warning(
                    "Redeem rejected: user=%s balance=%d cost=%d",
                    ctx.caller,
                    account.balance,
                    reward.cost,
                )
                raise InsufficientBalanceError(
                    f"balance {account.balance} is less than {reward.cost}"
                )

            points.put(
                replace(
                    account,
                    balance=account.balance - reward.cost,
                    total_spent=account.total_spent + reward.cost,
                    rewards_redeemed=account.rewards_redeemed + 1,
                    last_activity=ctx.height,
                )
            )
            totals = points.totals()
            points.put_totals(replace(totals, redeemed=totals.redeemed + reward.cost))
            RewardRepo(tx).put(
                replace(reward, available_quantity=reward.available_quantity - 1)
            )
            redemption = points.append_redemption(
                user=ctx.caller,
                reward_id=reward_id,
                points_spent=reward.cost,
                timestamp=ctx.height,
            )

        POINTS_MOVED.labels(kind="redeem").inc(reward.cost)
        logger.info(
            "Redeemed reward id=%d user=%s cost=%d",
            reward_id,
            ctx.caller,
            reward.cost,
        )
        return redemption

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_reward(self, reward_id: int) -> Reward | None:
        with self._store.transaction() as tx:
            return RewardRepo(tx).get(reward_id)

    def list_rewards(self, *, active_only: bool = False) -> list[Reward]:
        with self._store.transaction() as tx:
            rewards = RewardRepo(tx).list_all()
        if active_only:
            return [r for r in rewards if r.active]
        return rewards

    def redemptions(self, user: str) -> list[Redemption]:
        with self._store.transaction() as tx:
            return PointsRepo(tx).redemptions_for(user)
