from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from badge_ledger.api.dependencies import get_ledger
from badge_ledger.core.clock import ManualClock
from badge_ledger.core.config import SETTINGS
from badge_ledger.main import app
from badge_ledger.models.badge import Badge
from badge_ledger.repos.store import InMemoryKeyValueStore
from badge_ledger.services import token_service
from badge_ledger.services.ledger import Ledger, build_ledger

# Ensure repo root is on sys.path so `import badge_ledger` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

OWNER = SETTINGS.ledger_owner
ISSUER = "issuer-acme"
START_HEIGHT = 100
HASH = "ab" * 32


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=START_HEIGHT)


@pytest.fixture
def ledger(clock: ManualClock) -> Ledger:
    """Fresh in-memory ledger per test, owner record already seeded."""
    return build_ledger(InMemoryKeyValueStore(), clock, owner=OWNER)


@pytest.fixture
def issuer(ledger: Ledger) -> str:
    """ISSUER authorized by the owner."""
    ledger.authorization.authorize(ledger.context(OWNER), ISSUER, "Acme Academy")
    return ISSUER


@pytest.fixture
def client(ledger: Ledger) -> Iterator[TestClient]:
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


def mint_token(
    username: str = "test-user",
    roles: list[str] | None = None,
) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(sub=username, roles=roles)


def auth(username: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(username=username)}"}


# ---------------------------------------------------------------------------
# Ledger test helpers
# ---------------------------------------------------------------------------


def issue_badge(
    ledger: Ledger,
    recipient: str = "alice",
    *,
    issuer: str = ISSUER,
    expires_at: int | None = None,
) -> Badge:
    return ledger.badges.issue(
        ledger.context(issuer),
        recipient=recipient,
        type="course",
        title="Intro to Ledgers",
        description="Completed the intro course",
        metadata_uri="ipfs://badge-meta",
        verification_hash=HASH,
        expires_at=expires_at,
    )
