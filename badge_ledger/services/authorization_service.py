"""Authorization registry: root owner, admins, and authorized issuers.

Every other service asks this one for capability answers.  The
``*_in(tx, ...)`` variants answer against the caller's open transaction
so a command sees the same snapshot for its capability check and its
writes.
"""

from __future__ import annotations

import logging

from badge_ledger.core.errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from badge_ledger.models.context import CallContext
from badge_ledger.models.issuer import Admin, Issuer
from badge_ledger.repos.issuer_repo import AdminRepo, IssuerRepo
from badge_ledger.repos.store import KeyValueStore, Transaction
from badge_ledger.services.commands import ledger_command
from badge_ledger.services.validation import (
    MAX_NAME_LEN,
    require_identity,
    require_text,
)

logger = logging.getLogger(__name__)

OWNER_ISSUER_NAME = "owner"


class AuthorizationService:
    def __init__(self, store: KeyValueStore, *, owner: str) -> None:
        if not owner:
            raise ValueError("owner identity must be non-empty")
        self._store = store
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    def bootstrap(self, height: int = 0) -> None:
        """Seed the owner's issuer record.  Safe to call more than once."""
        with self._store.transaction() as tx:
            repo = IssuerRepo(tx)
            if repo.get(self._owner) is None:
                repo.put(
                    Issuer(
                        identity=self._owner,
                        name=OWNER_ISSUER_NAME,
                        authorized=True,
                        authorized_at=height,
                    )
                )
                logger.info("Seeded owner issuer record owner=%s", self._owner)

    # ------------------------------------------------------------------
    # Capability checks against an open transaction
    # ------------------------------------------------------------------

    def is_owner(self, identity: str) -> bool:
        return identity == self._owner

    def issuer_authorized_in(self, tx: Transaction, identity: str) -> bool:
        issuer = IssuerRepo(tx).get(identity)
        return issuer is not None and issuer.authorized

    def admin_in(self, tx: Transaction, identity: str) -> bool:
        return self.is_owner(identity) or AdminRepo(tx).get(identity) is not None

    def require_owner(self, ctx: CallContext, action: str) -> None:
        if not self.is_owner(ctx.caller):
            logger.warning(
                "Access denied: caller=%s is not the owner (action=%s)",
                ctx.caller,
                action,
            )
            raise UnauthorizedError(f"only the owner may {action}")

    def require_admin_in(self, tx: Transaction, ctx: CallContext, action: str) -> None:
        if not self.admin_in(tx, ctx.caller):
            logger.warning(
                "Access denied: caller=%s is not an admin (action=%s)",
                ctx.caller,
                action,
            )
            raise UnauthorizedError(f"only an admin may {action}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @ledger_command("authorize_issuer")
    def authorize(self, ctx: CallContext, issuer: str, name: str) -> Issuer:
        """Upsert an authorized issuer.

        Re-authorizing an already authorized issuer keeps its original
        ``authorized_at`` so repeated calls leave identical state.
        """
        self.require_owner(ctx, "authorize issuers")
        require_identity(issuer, "issuer")
        require_text(name, "name", max_len=MAX_NAME_LEN)

        with self._store.transaction() as tx:
            repo = IssuerRepo(tx)
            existing = repo.get(issuer)
            if existing is not None and existing.authorized:
                authorized_at = existing.authorized_at
            else:
                authorized_at = ctx.height
            record = Issuer(
                identity=issuer,
                name=name,
                authorized=True,
                authorized_at=authorized_at,
            )
            if record != existing:
                repo.put(record)

        logger.info("Authorized issuer=%s name=%s", issuer, name)
        return record

    @ledger_command("deauthorize_issuer")
    def deauthorize(self, ctx: CallContext, issuer: str) -> Issuer:
        """Clear an issuer's authorization.  Past issuances stay valid."""
        self.require_owner(ctx, "deauthorize issuers")
        require_identity(issuer, "issuer")
        if self.is_owner(issuer):
            logger.warning("Rejected deauthorization of the owner")
            raise InvalidInputError("the owner cannot be deauthorized")

        with self._store.transaction() as tx:
            repo = IssuerRepo(tx)
            existing = repo.get(issuer)
            if existing is None:
                logger.warning("Deauthorize rejected: unknown issuer=%s", issuer)
                raise NotFoundError(f"issuer {issuer!r} not found")
            record = Issuer(
                identity=existing.identity,
                name=existing.name,
                authorized=False,
                authorized_at=existing.authorized_at,
            )
            repo.put(record)

        logger.info("Deauthorized issuer=%s", issuer)
        return record

    @ledger_command("add_admin")
    def add_admin(self, ctx: CallContext, identity: str) -> Admin:
        self.require_owner(ctx, "add admins")
        require_identity(identity, "identity")

        with self._store.transaction() as tx:
            repo = AdminRepo(tx)
            if self.is_owner(identity) or repo.get(identity) is not None:
                logger.warning("Rejected duplicate admin=%s", identity)
                raise AlreadyExistsError(f"{identity!r} is already an admin")
            admin = Admin(identity=identity, added_at=ctx.height)
            repo.add(admin)

        logger.info("Added admin=%s", identity)
        return admin

    @ledger_command("remove_admin")
    def remove_admin(self, ctx: CallContext, identity: str) -> None:
        self.require_owner(ctx, "remove admins")
        require_identity(identity, "identity")

        with self._store.transaction() as tx:
            if not AdminRepo(tx).remove(identity):
                logger.warning("Remove admin rejected: unknown admin=%s", identity)
                raise NotFoundError(f"admin {identity!r} not found")

        logger.info("Removed admin=%s", identity)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_authorized(self, identity: str) -> bool:
        with self._store.transaction() as tx:
            return self.issuer_authorized_in(tx, identity)

    def is_admin(self, identity: str) -> bool:
        with self._store.transaction() as tx:
            return self.admin_in(tx, identity)

    def get_issuer(self, identity: str) -> Issuer | None:
        with self._store.transaction() as tx:
            return IssuerRepo(tx).get(identity)

    def list_admins(self) -> list[Admin]:
        with self._store.transaction() as tx:
            return AdminRepo(tx).list_all()

    def authorized_issuers(self) -> list[Issuer]:
        with self._store.transaction() as tx:
            return IssuerRepo(tx).list_authorized()
