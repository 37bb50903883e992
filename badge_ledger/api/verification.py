"""Verification endpoints.

Badge checks are public and never fail for a missing badge: they return
the worst-case sentinel report instead.  Recording a verification
request requires an authenticated caller.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from badge_ledger.api.dependencies import ContextDep, LedgerDep, public_height
from badge_ledger.core.config import SETTINGS
from badge_ledger.models.context import CallContext

router = APIRouter(prefix="/v1/verify", tags=["verification"])

_ANONYMOUS = "anonymous"


class AuthenticityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    badge_id: int
    exists: bool
    owner: str | None
    issuer: str | None
    revoked: bool
    expired: bool
    issuer_authorized: bool
    valid: bool


class OwnershipOut(BaseModel):
    badge_id: int
    owner: str
    verified: bool


class BatchVerifyIn(BaseModel):
    badge_ids: list[int] = Field(min_length=1, max_length=SETTINGS.max_batch_size)


class VerificationRequestIn(BaseModel):
    badge_id: int
    data: str = ""


class VerificationRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    request_id: str
    requester: str
    badge_id: int
    verified: bool
    verified_at: int | None
    data: str


HeightDep = Annotated[int, Depends(public_height)]


@router.get("/requests/{request_id}", response_model=VerificationRequestOut)
def get_verification_request(
    request_id: str, ledger: LedgerDep
) -> VerificationRequestOut:
    request = ledger.verification.get_verification_request(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="verification request not found")
    return VerificationRequestOut.model_validate(request)


@router.put(
    "/requests/{request_id}",
    response_model=VerificationRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def create_verification_request(
    request_id: str,
    body: VerificationRequestIn,
    ctx: ContextDep,
    ledger: LedgerDep,
) -> VerificationRequestOut:
    request = ledger.verification.create_verification_request(
        ctx, request_id, body.badge_id, body.data
    )
    return VerificationRequestOut.model_validate(request)


@router.post("/batch", response_model=list[AuthenticityOut])
def batch_verify(
    body: BatchVerifyIn, height: HeightDep, ledger: LedgerDep
) -> list[AuthenticityOut]:
    ctx = CallContext(caller=_ANONYMOUS, height=height)
    reports = ledger.verification.batch_verify(ctx, body.badge_ids)
    return [AuthenticityOut.model_validate(r) for r in reports]


@router.get("/{badge_id}", response_model=AuthenticityOut)
def verify_authenticity(
    badge_id: int, height: HeightDep, ledger: LedgerDep
) -> AuthenticityOut:
    ctx = CallContext(caller=_ANONYMOUS, height=height)
    report = ledger.verification.verify_authenticity(ctx, badge_id)
    return AuthenticityOut.model_validate(report)


@router.get("/{badge_id}/ownership", response_model=OwnershipOut)
def verify_ownership(
    badge_id: int,
    ledger: LedgerDep,
    owner: Annotated[str, Query(min_length=1)],
) -> OwnershipOut:
    verified = ledger.verification.verify_ownership(badge_id, owner)
    return OwnershipOut(badge_id=badge_id, owner=owner, verified=verified)
