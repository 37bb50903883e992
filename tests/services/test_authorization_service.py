from __future__ import annotations

import pytest

from badge_ledger.core.clock import ManualClock
from badge_ledger.core.errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from badge_ledger.repos.store import InMemoryKeyValueStore
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.ledger import Ledger
from badge_ledger.services.validation import MAX_IDENTITY_LEN
from tests.conftest import ISSUER, OWNER, START_HEIGHT


def test_owner_is_seeded_as_authorized_issuer(ledger: Ledger) -> None:
    owner = ledger.authorization.get_issuer(OWNER)
    assert owner is not None
    assert owner.authorized is True
    assert ledger.authorization.is_authorized(OWNER)
    assert ledger.authorization.is_admin(OWNER)


def test_bootstrap_is_idempotent() -> None:
    store = InMemoryKeyValueStore()
    auth = AuthorizationService(store, owner=OWNER)
    auth.bootstrap(1)
    auth.bootstrap(50)
    assert auth.get_issuer(OWNER).authorized_at == 1


def test_empty_owner_rejected() -> None:
    with pytest.raises(ValueError):
        AuthorizationService(InMemoryKeyValueStore(), owner="")


# ---- authorize / deauthorize ----


def test_owner_authorizes_issuer(ledger: Ledger) -> None:
    issuer = ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme")
    assert issuer.authorized is True
    assert issuer.authorized_at == START_HEIGHT
    assert ledger.authorization.is_authorized(ISSUER)


def test_authorize_is_idempotent(ledger: Ledger, clock: ManualClock) -> None:
    first = ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme")
    clock.advance(10)
    second = ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme")
    assert second == first
    assert ledger.authorization.get_issuer(ISSUER) == first


def test_authorize_renames_without_resetting_timestamp(
    ledger: Ledger, clock: ManualClock
) -> None:
    ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme")
    clock.advance(3)
    renamed = ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme Two")
    assert renamed.name == "Acme Two"
    assert renamed.authorized_at == START_HEIGHT


def test_non_owner_cannot_authorize(ledger: Ledger) -> None:
    with pytest.raises(UnauthorizedError):
        ledger.authorization.authorize(ledger.context("mallory"), ISSUER, "Acme")
    assert ledger.authorization.get_issuer(ISSUER) is None


def test_admin_cannot_authorize(ledger: Ledger) -> None:
    ledger.authorization.add_admin(ledger.context(OWNER), "carol")
    with pytest.raises(UnauthorizedError):
        ledger.authorization.authorize(ledger.context("carol"), ISSUER, "Acme")


@pytest.mark.parametrize("name", ["", "   ", "x" * 65])
def test_authorize_rejects_bad_name(ledger: Ledger, name: str) -> None:
    with pytest.raises(InvalidInputError):
        ledger.authorization.authorize(ledger.context(OWNER), ISSUER, name)


def test_deauthorize_keeps_record(ledger: Ledger, issuer: str) -> None:
    record = ledger.authorization.deauthorize(ledger.context(OWNER), issuer)
    assert record.authorized is False
    assert record.name == "Acme Academy"
    assert not ledger.authorization.is_authorized(issuer)


def test_reauthorize_after_deauthorize_stamps_new_height(
    ledger: Ledger, issuer: str, clock: ManualClock
) -> None:
    ledger.authorization.deauthorize(ledger.context(OWNER), issuer)
    clock.advance(5)
    record = ledger.authorization.authorize(ledger.context(OWNER), issuer, "Acme")
    assert record.authorized_at == START_HEIGHT + 5


def test_deauthorize_unknown_issuer(ledger: Ledger) -> None:
    with pytest.raises(NotFoundError):
        ledger.authorization.deauthorize(ledger.context(OWNER), "ghost")


def test_owner_cannot_be_deauthorized(ledger: Ledger) -> None:
    with pytest.raises(InvalidInputError):
        ledger.authorization.deauthorize(ledger.context(OWNER), OWNER)
    assert ledger.authorization.is_authorized(OWNER)


# ---- admins ----


def test_add_and_remove_admin(ledger: Ledger) -> None:
    admin = ledger.authorization.add_admin(ledger.context(OWNER), "carol")
    assert admin.added_at == START_HEIGHT
    assert ledger.authorization.is_admin("carol")
    assert [a.identity for a in ledger.authorization.list_admins()] == ["carol"]

    ledger.authorization.remove_admin(ledger.context(OWNER), "carol")
    assert not ledger.authorization.is_admin("carol")
    assert ledger.authorization.list_admins() == []


def test_add_admin_twice_fails(ledger: Ledger) -> None:
    ledger.authorization.add_admin(ledger.context(OWNER), "carol")
    with pytest.raises(AlreadyExistsError):
        ledger.authorization.add_admin(ledger.context(OWNER), "carol")


def test_owner_is_implicitly_admin(ledger: Ledger) -> None:
    with pytest.raises(AlreadyExistsError):
        ledger.authorization.add_admin(ledger.context(OWNER), OWNER)


def test_remove_unknown_admin(ledger: Ledger) -> None:
    with pytest.raises(NotFoundError):
        ledger.authorization.remove_admin(ledger.context(OWNER), "nobody")


def test_admin_cannot_add_admins(ledger: Ledger) -> None:
    ledger.authorization.add_admin(ledger.context(OWNER), "carol")
    with pytest.raises(UnauthorizedError):
        ledger.authorization.add_admin(ledger.context("carol"), "dave")


@pytest.mark.parametrize(
    "operation", ["authorize", "deauthorize", "add_admin", "remove_admin"]
)
def test_overlong_identity_rejected(ledger: Ledger, operation: str) -> None:
    identity = "i" * (MAX_IDENTITY_LEN + 1)
    args = (identity, "Long Name") if operation == "authorize" else (identity,)
    with pytest.raises(InvalidInputError):
        getattr(ledger.authorization, operation)(ledger.context(OWNER), *args)
    assert ledger.authorization.get_issuer(identity) is None
    assert ledger.authorization.list_admins() == []
