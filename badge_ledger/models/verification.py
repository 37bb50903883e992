from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VerificationRequest:
    """Third-party attestation that a badge was checked.  Immutable."""

    request_id: str  # 32 bytes, hex-encoded
    requester: str
    badge_id: int
    verified: bool
    verified_at: int | None
    data: str


@dataclass(frozen=True, slots=True)
class AuthenticityReport:
    """Point-in-time view of a badge.

    For a missing badge ``exists`` is False and every other flag takes its
    worst-case value.  Callers must treat that as "unverifiable", never as
    badge data.
    """

    badge_id: int
    exists: bool
    owner: str | None
    issuer: str | None
    revoked: bool
    expired: bool
    issuer_authorized: bool
    valid: bool

    @staticmethod
    def missing(badge_id: int) -> AuthenticityReport:
        return AuthenticityReport(
            badge_id=badge_id,
            exists=False,
            owner=None,
            issuer=None,
            revoked=True,
            expired=True,
            issuer_authorized=False,
            valid=False,
        )
