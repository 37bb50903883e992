from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Badge:
    """Issued credential record.  Created once, never deleted.

    Expiry is not a stored state: ``is_expired`` is evaluated against the
    caller's height, so a badge can be unrevoked in storage and still
    expired in every view.
    """

    id: int
    owner: str
    issuer: str
    type: str
    title: str
    description: str
    metadata_uri: str
    issued_at: int
    verification_hash: str  # 32 bytes, hex-encoded
    expires_at: int | None = None
    revoked: bool = False
    revoked_at: int | None = None
    revocation_reason: str | None = None

    def is_expired(self, now: int) -> bool:
        return self.expires_at is not None and now >= self.expires_at

    def is_valid(self, now: int) -> bool:
        return not self.revoked and not self.is_expired(now)


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    """Outcome of one item of a batch command.

    ``ok`` is the plain success flag; ``error`` names the LedgerError kind
    that rejected the item, or None on success.
    """

    badge_id: int
    ok: bool
    error: str | None = None
    message: str | None = None
