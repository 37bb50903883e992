"""Composition root: one store, one clock, all ledger components."""

from __future__ import annotations

from dataclasses import dataclass

from badge_ledger.core.clock import Clock
from badge_ledger.core.config import Settings
from badge_ledger.models.context import CallContext
from badge_ledger.repos.store import KeyValueStore
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.badge_service import BadgeService
from badge_ledger.services.points_service import PointsService
from badge_ledger.services.rewards_service import RewardsService
from badge_ledger.services.verification_service import VerificationService


@dataclass(frozen=True)
class Ledger:
    store: KeyValueStore
    clock: Clock
    authorization: AuthorizationService
    badges: BadgeService
    verification: VerificationService
    points: PointsService
    rewards: RewardsService

    def context(self, caller: str) -> CallContext:
        """Read the clock once and bind it to ``caller``."""
        return CallContext(caller=caller, height=self.clock.now())


def build_ledger(
    store: KeyValueStore,
    clock: Clock,
    *,
    owner: str,
    allow_revoke_expired: bool = False,
    max_batch_size: int = 50,
) -> Ledger:
    authorization = AuthorizationService(store, owner=owner)
    authorization.bootstrap(clock.now())
    return Ledger(
        store=store,
        clock=clock,
        authorization=authorization,
        badges=BadgeService(
            store,
            authorization,
            allow_revoke_expired=allow_revoke_expired,
            max_batch_size=max_batch_size,
        ),
        verification=VerificationService(store, authorization),
        points=PointsService(store, authorization),
        rewards=RewardsService(store, authorization),
    )


def ledger_from_settings(
    settings: Settings, store: KeyValueStore, clock: Clock
) -> Ledger:
    return build_ledger(
        store,
        clock,
        owner=settings.ledger_owner,
        allow_revoke_expired=settings.allow_revoke_expired,
        max_batch_size=settings.max_batch_size,
    )
