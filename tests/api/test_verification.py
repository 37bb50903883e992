from __future__ import annotations

from fastapi.testclient import TestClient

from badge_ledger.core.config import SETTINGS
from badge_ledger.services.ledger import Ledger
from tests.conftest import auth, issue_badge

REQUEST_ID = "0f" * 32


def test_verify_is_public(client: TestClient, ledger: Ledger, issuer: str) -> None:
    badge = issue_badge(ledger, "alice")
    resp = client.get(f"/v1/verify/{badge.id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["exists"] is True
    assert data["valid"] is True
    assert data["owner"] == "alice"


def test_verify_missing_badge_returns_sentinel(client: TestClient) -> None:
    resp = client.get("/v1/verify/404")
    assert resp.status_code == 200
    assert resp.json() == {
        "badge_id": 404,
        "exists": False,
        "owner": None,
        "issuer": None,
        "revoked": True,
        "expired": True,
        "issuer_authorized": False,
        "valid": False,
    }


def test_verify_ownership(client: TestClient, ledger: Ledger, issuer: str) -> None:
    badge = issue_badge(ledger, "alice")
    resp = client.get(f"/v1/verify/{badge.id}/ownership", params={"owner": "alice"})
    assert resp.json()["verified"] is True
    resp = client.get(f"/v1/verify/{badge.id}/ownership", params={"owner": "bob"})
    assert resp.json()["verified"] is False


def test_batch_verify(client: TestClient, ledger: Ledger, issuer: str) -> None:
    badge = issue_badge(ledger, "alice")
    resp = client.post("/v1/verify/batch", json={"badge_ids": [badge.id, 9]})
    assert resp.status_code == 200
    assert [r["exists"] for r in resp.json()] == [True, False]


def test_batch_verify_size_limits(client: TestClient) -> None:
    assert client.post("/v1/verify/batch", json={"badge_ids": []}).status_code == 422
    too_many = list(range(1, SETTINGS.max_batch_size + 2))
    resp = client.post("/v1/verify/batch", json={"badge_ids": too_many})
    assert resp.status_code == 422


def test_verification_request_flow(
    client: TestClient, ledger: Ledger, issuer: str
) -> None:
    badge = issue_badge(ledger, "alice")
    url = f"/v1/verify/requests/{REQUEST_ID}"

    assert client.put(url, json={"badge_id": badge.id}).status_code == 401

    resp = client.put(
        url, json={"badge_id": badge.id, "data": "ref"}, headers=auth("employer")
    )
    assert resp.status_code == 201
    assert resp.json()["requester"] == "employer"

    resp = client.put(url, json={"badge_id": badge.id}, headers=auth("employer"))
    assert resp.status_code == 409
    assert resp.json()["error"]["kind"] == "AlreadyExists"

    resp = client.get(url)
    assert resp.status_code == 200
    assert resp.json()["data"] == "ref"


def test_unknown_verification_request_is_404(client: TestClient) -> None:
    assert client.get(f"/v1/verify/requests/{REQUEST_ID}").status_code == 404
