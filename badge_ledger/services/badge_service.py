"""Badge registry: issuance, transfer, revocation, and expiry updates.

State machine per badge:

    Active --revoke--> Revoked        (terminal; revoked never goes back)

Expiry is derived, never stored: ``badge.is_expired(ctx.height)``.  The
transfer path checks only ``revoked``; revoke and expiry updates also
refuse badges that are already expired.

Every command runs its checks inside one store transaction and raises
before staging any write, so a rejected command leaves no trace.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from badge_ledger.core.errors import (
    AlreadyRevokedError,
    ExpiredError,
    InvalidInputError,
    LedgerError,
    NotFoundError,
    TransferFailedError,
    UnauthorizedError,
)
from badge_ledger.models.badge import Badge, BatchItemResult
from badge_ledger.models.context import CallContext
from badge_ledger.models.ownership import OwnershipHistoryEntry
from badge_ledger.repos.badge_repo import BadgeRepo, HistoryRepo
from badge_ledger.repos.store import KeyValueStore, Transaction
from badge_ledger.services.authorization_service import AuthorizationService
from badge_ledger.services.commands import ledger_command
from badge_ledger.services.validation import (
    MAX_DESCRIPTION_LEN,
    MAX_REASON_LEN,
    MAX_TITLE_LEN,
    MAX_TYPE_LEN,
    MAX_URI_LEN,
    require_batch,
    require_hash32,
    require_identity,
    require_text,
)

logger = logging.getLogger(__name__)


class BadgeService:
    def __init__(
        self,
        store: KeyValueStore,
        authorization: AuthorizationService,
        *,
        allow_revoke_expired: bool = False,
        max_batch_size: int = 50,
    ) -> None:
        self._store = store
        self._auth = authorization
        self._allow_revoke_expired = allow_revoke_expired
        self._max_batch_size = max_batch_size

    def _load(self, tx: Transaction, badge_id: int) -> Badge:
        badge = BadgeRepo(tx).get(badge_id)
        if badge is None:
            logger.warning("Badge not found id=%s", badge_id)
            raise NotFoundError(f"badge {badge_id} not found")
        return badge

    def _require_manager(
        self, tx: Transaction, ctx: CallContext, badge: Badge, action: str
    ) -> None:
        """Issuer of the badge, the owner, or a registered admin."""
        if ctx.caller == badge.issuer or self._auth.admin_in(tx, ctx.caller):
            return
        logger.warning(
            "Access denied: caller=%s may not %s badge id=%d (issuer=%s)",
            ctx.caller,
            action,
            badge.id,
            badge.issuer,
        )
        raise UnauthorizedError(f"caller may not {action} badge {badge.id}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @ledger_command("issue_badge")
    def issue(
        self,
        ctx: CallContext,
        *,
        recipient: str,
        type: str,
        title: str,
        description: str,
        metadata_uri: str,
        verification_hash: str,
        expires_at: int | None = None,
    ) -> Badge:
        require_identity(recipient, "recipient")
        require_text(type, "type", max_len=MAX_TYPE_LEN)
        require_text(title, "title", max_len=MAX_TITLE_LEN)
        require_text(
            description, "description", max_len=MAX_DESCRIPTION_LEN, allow_empty=True
        )
        require_text(metadata_uri, "metadata_uri", max_len=MAX_URI_LEN, allow_empty=True)
        verification_hash = require_hash32(verification_hash, "verification_hash")

        with self._store.transaction() as tx:
            if not self._auth.issuer_authorized_in(tx, ctx.caller):
                logger.warning("Issue rejected: issuer=%s not authorized", ctx.caller)
                raise UnauthorizedError("caller is not an authorized issuer")
            if self._auth.is_owner(recipient):
                logger.warning("Issue rejected: recipient is the ledger owner")
                raise InvalidInputError("the ledger owner cannot receive badges")
            if expires_at is not None and expires_at <= ctx.height:
                logger.warning(
                    "Issue rejected: expires_at=%d not after height=%d",
                    expires_at,
                    ctx.height,
                )
                raise InvalidInputError("expires_at must be in the future")

            repo = BadgeRepo(tx)
            badge = Badge(
                id=repo.next_id(),
                owner=recipient,
                issuer=ctx.caller,
                type=type,
                title=title,
                description=description,
                metadata_uri=metadata_uri,
                issued_at=ctx.height,
                verification_hash=verification_hash,
                expires_at=expires_at,
            )
            repo.put(badge)

        logger.info(
            "Issued badge id=%d issuer=%s owner=%s type=%s",
            badge.id,
            badge.issuer,
            badge.owner,
            badge.type,
            extra={"operation": "issue_badge", "caller": ctx.caller},
        )
        return badge

    @ledger_command("transfer_badge")
    def transfer(
        self, ctx: CallContext, badge_id: int, new_owner: str
    ) -> OwnershipHistoryEntry:
        """Move a badge to ``new_owner``.  Expiry is neither checked nor changed."""
        with self._store.transaction() as tx:
            badge = self._load(tx, badge_id)
            if ctx.caller != badge.owner:
                logger.warning(
                    "Transfer rejected: caller=%s does not own badge id=%d",
                    ctx.caller,
                    badge_id,
                )
                raise UnauthorizedError("only the badge owner may transfer it")
            require_identity(new_owner, "new_owner")
            if badge.revoked:
                logger.warning("Transfer rejected: badge id=%d is revoked", badge_id)
                raise AlreadyRevokedError(f"badge {badge_id} is revoked")
            if new_owner == badge.owner:
                logger.warning("Transfer rejected: badge id=%d to itself", badge_id)
                raise TransferFailedError("new owner is already the owner")

            BadgeRepo(tx).put(replace(badge, owner=new_owner))
            entry = HistoryRepo(tx).append(
                badge_id=badge_id,
                previous_owner=ctx.caller,
                new_owner=new_owner,
                transferred_at=ctx.height,
            )

        logger.info(
            "Transferred badge id=%d from=%s to=%s seq=%d",
            badge_id,
            ctx.caller,
            new_owner,
            entry.sequence,
        )
        return entry

    @ledger_command("revoke_badge")
    def revoke(
        self, ctx: CallContext, badge_id: int, reason: str | None = None
    ) -> Badge:
        with self._store.transaction() as tx:
            badge = self._load(tx, badge_id)
            self._require_manager(tx, ctx, badge, "revoke")
            if reason is not None:
                require_text(reason, "reason", max_len=MAX_REASON_LEN, allow_empty=True)
            if badge.revoked:
                logger.warning("Revoke rejected: badge id=%d already revoked", badge_id)
                raise AlreadyRevokedError(f"badge {badge_id} is already revoked")
            if not self._allow_revoke_expired and badge.is_expired(ctx.height):
                logger.warning("Revoke rejected: badge id=%d has expired", badge_id)
                raise ExpiredError(f"badge {badge_id} has expired")

            revoked = replace(
                badge,
                revoked=True,
                revoked_at=ctx.height,
                revocation_reason=reason,
            )
            BadgeRepo(tx).put(revoked)

        logger.info(
            "Revoked badge id=%d by=%s reason=%s", badge_id, ctx.caller, reason or "-"
        )
        return revoked

    def batch_revoke(
        self, ctx: CallContext, badge_ids: list[int], reason: str | None = None
    ) -> list[BatchItemResult]:
        """Revoke each id independently.

        One item's failure never aborts the others.  Each result keeps the
        error kind that rejected it instead of collapsing it to a bare bool.
        """
        require_batch(badge_ids, "badge_ids", max_size=self._max_batch_size)

        results: list[BatchItemResult] = []
        for badge_id in badge_ids:
            try:
                self.revoke(ctx, badge_id, reason)
            except LedgerError as e:
                results.append(
                    BatchItemResult(
                        badge_id=badge_id, ok=False, error=e.kind, message=e.message
                    )
                )
            else:
                results.append(BatchItemResult(badge_id=badge_id, ok=True))

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Batch revoke by=%s items=%d failed=%d", ctx.caller, len(results), failed
        )
        return results

    @ledger_command("update_expiry")
    def update_expiry(
        self, ctx: CallContext, badge_id: int, new_expires_at: int | None
    ) -> Badge:
        """Set or clear a badge's expiry.  ``None`` removes it."""
        with self._store.transaction() as tx:
            badge = self._load(tx, badge_id)
            self._require_manager(tx, ctx, badge, "update expiry of")
            if badge.revoked:
                logger.warning("Expiry update rejected: badge id=%d revoked", badge_id)
                raise AlreadyRevokedError(f"badge {badge_id} is revoked")
            if badge.is_expired(ctx.height):
                logger.warning("Expiry update rejected: badge id=%d expired", badge_id)
                raise ExpiredError(f"badge {badge_id} has expired")
            if new_expires_at is not None and new_expires_at <= ctx.height:
                logger.warning(
                    "Expiry update rejected: %d not after height=%d",
                    new_expires_at,
                    ctx.height,
                )
                raise InvalidInputError("new expiry must be in the future")

            updated = replace(badge, expires_at=new_expires_at)
            BadgeRepo(tx).put(updated)

        logger.info("Updated expiry badge id=%d expires_at=%s", badge_id, new_expires_at)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_badge(self, badge_id: int) -> Badge | None:
        with self._store.transaction() as tx:
            return BadgeRepo(tx).get(badge_id)

    def badge_count(self) -> int:
        with self._store.transaction() as tx:
            return BadgeRepo(tx).count()

    def is_expired(self, ctx: CallContext, badge_id: int) -> bool:
        """Missing badges read as expired."""
        badge = self.get_badge(badge_id)
        return badge is None or badge.is_expired(ctx.height)

    def is_valid(self, ctx: CallContext, badge_id: int) -> bool:
        badge = self.get_badge(badge_id)
        return badge is not None and badge.is_valid(ctx.height)

    def history(self, badge_id: int) -> list[OwnershipHistoryEntry]:
        with self._store.transaction() as tx:
            return HistoryRepo(tx).list_for(badge_id)

    def transfer_count(self, badge_id: int) -> int:
        with self._store.transaction() as tx:
            return HistoryRepo(tx).count(badge_id)
