from __future__ import annotations

from badge_ledger.models.verification import VerificationRequest
from badge_ledger.repos.store import Transaction

VERIFICATION_REQUESTS = "verification_requests"


class VerificationRequestRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx

    def get(self, request_id: str) -> VerificationRequest | None:
        return self._tx.get(VERIFICATION_REQUESTS, request_id)

    def add(self, request: VerificationRequest) -> bool:
        """Store a new request.  Returns False if the id is already taken."""
        return self._tx.put_if_absent(
            VERIFICATION_REQUESTS, request.request_id, request
        )
