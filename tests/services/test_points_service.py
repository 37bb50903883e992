from __future__ import annotations

import pytest

from badge_ledger.core.clock import ManualClock
from badge_ledger.core.errors import (
    InsufficientBalanceError,
    InvalidInputError,
    UnauthorizedError,
)
from badge_ledger.services.ledger import Ledger
from badge_ledger.services.validation import MAX_IDENTITY_LEN
from tests.conftest import OWNER, START_HEIGHT


def _assert_conserved(ledger: Ledger) -> None:
    assert ledger.points.total_balances() == ledger.points.totals().circulating


def test_new_identity_has_empty_account(ledger: Ledger) -> None:
    stats = ledger.points.get_stats("nobody")
    assert stats.balance == 0
    assert stats.last_activity is None
    assert ledger.points.get_balance("nobody") == 0


def test_award_updates_account_and_totals(ledger: Ledger) -> None:
    account = ledger.points.award(ledger.context(OWNER), "alice", 50)
    assert account.balance == 50
    assert account.total_earned == 50
    assert account.last_activity == START_HEIGHT
    assert ledger.points.totals().issued == 50
    _assert_conserved(ledger)


def test_admin_may_award(ledger: Ledger) -> None:
    ledger.authorization.add_admin(ledger.context(OWNER), "carol")
    ledger.points.award(ledger.context("carol"), "alice", 5)
    assert ledger.points.get_balance("alice") == 5


def test_non_admin_cannot_award(ledger: Ledger) -> None:
    with pytest.raises(UnauthorizedError):
        ledger.points.award(ledger.context("alice"), "alice", 1_000)
    assert ledger.points.get_balance("alice") == 0


@pytest.mark.parametrize("amount", [0, -5, True])
def test_award_rejects_non_positive_amounts(ledger: Ledger, amount: int) -> None:
    with pytest.raises(InvalidInputError):
        ledger.points.award(ledger.context(OWNER), "alice", amount)


def test_deduct_more_than_balance_leaves_balance(ledger: Ledger) -> None:
    ledger.points.award(ledger.context(OWNER), "alice", 30)
    with pytest.raises(InsufficientBalanceError):
        ledger.points.deduct(ledger.context(OWNER), "alice", 50)
    assert ledger.points.get_balance("alice") == 30
    assert ledger.points.totals().deducted == 0


def test_deduct_moves_totals(ledger: Ledger) -> None:
    ledger.points.award(ledger.context(OWNER), "alice", 30)
    account = ledger.points.deduct(ledger.context(OWNER), "alice", 10)
    assert account.balance == 20
    assert account.total_earned == 30
    assert ledger.points.totals().deducted == 10
    _assert_conserved(ledger)


def test_transfer_moves_balance_only(ledger: Ledger, clock: ManualClock) -> None:
    ledger.points.award(ledger.context(OWNER), "alice", 40)
    clock.advance(3)
    sender, receiver = ledger.points.transfer_points(ledger.context("alice"), "bob", 15)

    assert (sender.balance, receiver.balance) == (25, 15)
    assert sender.total_spent == 0
    assert receiver.total_earned == 0
    assert sender.last_activity == receiver.last_activity == START_HEIGHT + 3
    assert ledger.points.totals().issued == 40
    _assert_conserved(ledger)


def test_transfer_rejects_overdraft_and_self(ledger: Ledger) -> None:
    ledger.points.award(ledger.context(OWNER), "alice", 10)
    with pytest.raises(InsufficientBalanceError):
        ledger.points.transfer_points(ledger.context("alice"), "bob", 11)
    with pytest.raises(InvalidInputError):
        ledger.points.transfer_points(ledger.context("alice"), "alice", 1)
    assert ledger.points.get_balance("alice") == 10
    assert ledger.points.get_balance("bob") == 0


def test_conservation_across_mixed_operations(ledger: Ledger) -> None:
    owner = ledger.context(OWNER)
    ledger.points.award(owner, "alice", 100)
    ledger.points.award(owner, "bob", 20)
    ledger.points.transfer_points(ledger.context("alice"), "carol", 35)
    ledger.points.deduct(owner, "bob", 5)
    ledger.points.transfer_points(ledger.context("carol"), "bob", 10)

    totals = ledger.points.totals()
    assert (totals.issued, totals.deducted, totals.redeemed) == (120, 5, 0)
    assert ledger.points.total_balances() == 115
    _assert_conserved(ledger)


def test_overlong_identity_rejected_before_any_write(ledger: Ledger) -> None:
    recipient = "u" * (MAX_IDENTITY_LEN + 1)
    with pytest.raises(InvalidInputError):
        ledger.points.award(ledger.context(OWNER), recipient, 5)
    with pytest.raises(InvalidInputError):
        ledger.points.transfer_points(ledger.context(OWNER), recipient, 5)
    assert ledger.points.totals().issued == 0


def test_identity_at_the_limit_is_accepted(ledger: Ledger) -> None:
    recipient = "u" * MAX_IDENTITY_LEN
    ledger.points.award(ledger.context(OWNER), recipient, 5)
    assert ledger.points.get_balance(recipient) == 5
