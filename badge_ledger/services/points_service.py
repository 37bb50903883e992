"""Points ledger: balances, activity stats, and global totals.

Conservation: the sum of all balances always equals
``totals.issued - totals.deducted - totals.redeemed``.  Awards and
deductions move the totals; transfers between accounts never do.
Redemptions (see rewards_service) move ``redeemed``.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from badge_ledger.core.errors import InsufficientBalanceError, InvalidInputError
from badge_ledger.core.metrics import POINTS_MOVED
from badge_ledger.models.context import CallContext
from badge_ledger.models.points import PointsAccount, PointsTotals
from badge_ledger.repos.points_repo import PointsRepo
from badge_ledger.repos.store import KeyValueStore
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.commands import ledger_command
from badge_ledger.services.validation import require_identity, require_positive

logger = logging.getLogger(__name__)


class PointsService:
    def __init__(
        self, store: KeyValueStore, authorization: AuthorizationService
    ) -> None:
        self._store = store
        self._auth = authorization

    @ledger_command("award_points")
    def award(self, ctx: CallContext, recipient: str, amount: int) -> PointsAccount:
        require_identity(recipient, "recipient")
        require_positive(amount, "amount")

        with self._store.transaction() as tx:
            self._auth.require_admin_in(tx, ctx, "award points")
            repo = PointsRepo(tx)
            account = repo.get(recipient)
            updated = replace(
                account,
                balance=account.balance + amount,
                total_earned=account.total_earned + amount,
                last_activity=ctx.height,
            )
            totals = repo.totals()
            repo.put(updated)
            repo.put_totals(replace(totals, issued=totals.issued + amount))

        POINTS_MOVED.labels(kind="award").inc(amount)
        logger.info("Awarded %d points to=%s by=%s", amount, recipient, ctx.caller)
        return updated

    @ledger_command("deduct_points")
    def deduct(self, ctx: CallContext, user: str, amount: int) -> PointsAccount:
        require_identity(user, "user")
        require_positive(amount, "amount")

        with self._store.transaction() as tx:
            self._auth.require_admin_in(tx, ctx, "deduct points")
            repo = PointsRepo(tx)
            account = repo.get(user)
            if account.balance < amount:
                logger.warning(
                    "Deduct rejected: user=%s balance=%d amount=%d",
                    user,
                    account.balance,
                    amount,
                )
                raise InsufficientBalanceError(
                    f"balance {account.balance} is less than {amount}"
                )
            updated = replace(
                account,
                balance=account.balance - amount,
                last_activity=ctx.height,
            )
            totals = repo.totals()
            repo.put(updated)
            repo.put_totals(replace(totals, deducted=totals.deducted + amount))

        POINTS_MOVED.labels(kind="deduct").inc(amount)
        logger.info("Deducted %d points from=%s by=%s", amount, user, ctx.caller)
        return updated

    @ledger_command("transfer_points")
    def transfer_points(
        self, ctx: CallContext, recipient: str, amount: int
    ) -> tuple[PointsAccount, PointsAccount]:
        """Move points from the caller to ``recipient``.

        Returns the (sender, recipient) accounts after the move.
        """
        require_identity(recipient, "recipient")
        require_positive(amount, "amount")
        if recipient == ctx.caller:
            logger.warning("Rejected self-transfer of points by=%s", ctx.caller)
            raise InvalidInputError("cannot transfer points to yourself")

        with self._store.transaction() as tx:
            repo = PointsRepo(tx)
            sender = repo.get(ctx.caller)
            if sender.balance < amount:
                logger.warning(
                    "Points transfer rejected: sender=%s balance=%d amount=%d",
                    ctx.caller,
                    sender.balance,
                    amount,
                )
                raise InsufficientBalanceError(
                    f"balance {sender.balance} is less than {amount}"
                )
            receiver = repo.get(recipient)
            sender = replace(
                sender, balance=sender.balance - amount, last_activity=ctx.height
            )
            receiver = replace(
                receiver, balance=receiver.balance + amount, last_activity=ctx.height
            )
            repo.put(sender)
            repo.put(receiver)

        POINTS_MOVED.labels(kind="transfer").inc(amount)
        logger.info(
            "Transferred %d points from=%s to=%s", amount, ctx.caller, recipient
        )
        return sender, receiver

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_balance(self, identity: str) -> int:
        return self.get_stats(identity).balance

    def get_stats(self, identity: str) -> PointsAccount:
        with self._store.transaction() as tx:
            return PointsRepo(tx).get(identity)

    def totals(self) -> PointsTotals:
        with self._store.transaction() as tx:
            return PointsRepo(tx).totals()

    def total_balances(self) -> int:
        with self._store.transaction() as tx:
            return sum(a.balance for a in PointsRepo(tx).list_accounts())
