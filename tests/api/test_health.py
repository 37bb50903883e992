from __future__ import annotations

from fastapi.testclient import TestClient

from badge_ledger.core.clock import ManualClock
from tests.conftest import START_HEIGHT


def test_health_returns_ok(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    # In tests, DATABASE_URL is not configured
    assert data["checks"]["database"] == "not_configured"


def test_health_reports_current_height(client: TestClient, clock: ManualClock) -> None:
    assert client.get("/health").json()["height"] == START_HEIGHT
    clock.advance(7)
    assert client.get("/health").json()["height"] == START_HEIGHT + 7
