"""Read-side checks over badges plus the verification request ledger.

All checks except ``create_verification_request`` are pure queries: a
missing badge yields the worst-case sentinel report instead of an error.
"""

from __future__ import annotations

import logging

from badge_ledger.core.errors import AlreadyExistsError, NotFoundError
from badge_ledger.models.context import CallContext
from badge_ledger.models.verification import AuthenticityReport, VerificationRequest
from badge_ledger.repos.badge_repo import BadgeRepo
from badge_ledger.repos.store import KeyValueStore, Transaction
from badge_ledger.repos.verification_repo import VerificationRequestRepo
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.commands import ledger_command
from badge_ledger.services.validation import (
    MAX_REQUEST_DATA_LEN,
    require_hash32,
    require_text,
)

logger = logging.getLogger(__name__)


class VerificationService:
    def __init__(
        self, store: KeyValueStore, authorization: AuthorizationService
    ) -> None:
        self._store = store
        self._auth = authorization

    def _report(
        self, tx: Transaction, ctx: CallContext, badge_id: int
    ) -> AuthenticityReport:
        badge = BadgeRepo(tx).get(badge_id)
        if badge is None:
            return AuthenticityReport.missing(badge_id)
        expired = badge.is_expired(ctx.height)
        return AuthenticityReport(
            badge_id=badge_id,
            exists=True,
            owner=badge.owner,
            issuer=badge.issuer,
            revoked=badge.revoked,
            expired=expired,
            issuer_authorized=self._auth.issuer_authorized_in(tx, badge.issuer),
            valid=not badge.revoked and not expired,
        )

    def verify_ownership(self, badge_id: int, claimed_owner: str) -> bool:
        with self._store.transaction() as tx:
            badge = BadgeRepo(tx).get(badge_id)
        return badge is not None and badge.owner == claimed_owner

    def verify_authenticity(
        self, ctx: CallContext, badge_id: int
    ) -> AuthenticityReport:
        with self._store.transaction() as tx:
            report = self._report(tx, ctx, badge_id)
        logger.debug("Authenticity check badge id=%d exists=%s", badge_id, report.exists)
        return report

    def batch_verify(
        self, ctx: CallContext, badge_ids: list[int]
    ) -> list[AuthenticityReport]:
        """One report per id, in input order, from a single snapshot."""
        with self._store.transaction() as tx:
            return [self._report(tx, ctx, badge_id) for badge_id in badge_ids]

    @ledger_command("create_verification_request")
    def create_verification_request(
        self, ctx: CallContext, request_id: str, badge_id: int, data: str
    ) -> VerificationRequest:
        """Record that ``ctx.caller`` verified a badge.

        The request is marked verified on creation; it records an
        attestation and does not gate anything.  Request ids are one-shot:
        reusing one fails with AlreadyExists.
        """
        request_id = require_hash32(request_id, "request_id")
        require_text(data, "data", max_len=MAX_REQUEST_DATA_LEN, allow_empty=True)

        with self._store.transaction() as tx:
            if BadgeRepo(tx).get(badge_id) is None:
                logger.warning("Verification request for unknown badge id=%d", badge_id)
                raise NotFoundError(f"badge {badge_id} not found")
            request = VerificationRequest(
                request_id=request_id,
                requester=ctx.caller,
                badge_id=badge_id,
                verified=True,
                verified_at=ctx.height,
                data=data,
            )
            if not VerificationRequestRepo(tx).add(request):
                logger.warning("Rejected duplicate verification request=%s", request_id)
                raise AlreadyExistsError(f"verification request {request_id} exists")

        logger.info(
            "Recorded verification request=%s badge id=%d requester=%s",
            request_id,
            badge_id,
            ctx.caller,
        )
        return request

    def get_verification_request(self, request_id: str) -> VerificationRequest | None:
        with self._store.transaction() as tx:
            return VerificationRequestRepo(tx).get(request_id.lower())
