"""Badge registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict

from badge_ledger.api.dependencies import ContextDep, LedgerDep

router = APIRouter(prefix="/v1/badges", tags=["badges"])


class BadgeIssueIn(BaseModel):
    recipient: str
    type: str
    title: str
    description: str = ""
    metadata_uri: str = ""
    verification_hash: str
    expires_at: int | None = None


class BadgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: str
    issuer: str
    type: str
    title: str
    description: str
    metadata_uri: str
    issued_at: int
    verification_hash: str
    expires_at: int | None
    revoked: bool
    revoked_at: int | None
    revocation_reason: str | None


class TransferIn(BaseModel):
    new_owner: str


class HistoryEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    badge_id: int
    sequence: int
    previous_owner: str
    new_owner: str
    transferred_at: int


class RevokeIn(BaseModel):
    reason: str | None = None


class BatchRevokeIn(BaseModel):
    badge_ids: list[int]
    reason: str | None = None


class BatchItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    badge_id: int
    ok: bool
    error: str | None
    message: str | None


class ExpiryIn(BaseModel):
    expires_at: int | None


@router.post("", response_model=BadgeOut, status_code=status.HTTP_201_CREATED)
def issue_badge(body: BadgeIssueIn, ctx: ContextDep, ledger: LedgerDep) -> BadgeOut:
    badge = ledger.badges.issue(
        ctx,
        recipient=body.recipient,
        type=body.type,
        title=body.title,
        description=body.description,
        metadata_uri=body.metadata_uri,
        verification_hash=body.verification_hash,
        expires_at=body.expires_at,
    )
    return BadgeOut.model_validate(badge)


@router.post("/batch-revoke", response_model=list[BatchItemOut])
def batch_revoke(
    body: BatchRevokeIn, ctx: ContextDep, ledger: LedgerDep
) -> list[BatchItemOut]:
    results = ledger.badges.batch_revoke(ctx, body.badge_ids, body.reason)
    return [BatchItemOut.model_validate(r) for r in results]


@router.get("/{badge_id}", response_model=BadgeOut)
def get_badge(badge_id: int, ledger: LedgerDep) -> BadgeOut:
    badge = ledger.badges.get_badge(badge_id)
    if badge is None:
        raise HTTPException(status_code=404, detail="badge not found")
    return BadgeOut.model_validate(badge)


@router.get("/{badge_id}/history", response_model=list[HistoryEntryOut])
def get_history(badge_id: int, ledger: LedgerDep) -> list[HistoryEntryOut]:
    return [HistoryEntryOut.model_validate(e) for e in ledger.badges.history(badge_id)]


@router.post("/{badge_id}/transfer", response_model=HistoryEntryOut)
def transfer_badge(
    badge_id: int, body: TransferIn, ctx: ContextDep, ledger: LedgerDep
) -> HistoryEntryOut:
    entry = ledger.badges.transfer(ctx, badge_id, body.new_owner)
    return HistoryEntryOut.model_validate(entry)


@router.post("/{badge_id}/revoke", response_model=BadgeOut)
def revoke_badge(
    badge_id: int, body: RevokeIn, ctx: ContextDep, ledger: LedgerDep
) -> BadgeOut:
    return BadgeOut.model_validate(ledger.badges.revoke(ctx, badge_id, body.reason))


@router.patch("/{badge_id}/expiry", response_model=BadgeOut)
def update_expiry(
    badge_id: int, body: ExpiryIn, ctx: ContextDep, ledger: LedgerDep
) -> BadgeOut:
    badge = ledger.badges.update_expiry(ctx, badge_id, body.expires_at)
    return BadgeOut.model_validate(badge)
