"""Points ledger endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from badge_ledger.api.dependencies import ContextDep, LedgerDep

router = APIRouter(prefix="/v1/points", tags=["points"])


class PointsAccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identity: str
    balance: int
    total_earned: int
    total_spent: int
    rewards_redeemed: int
    last_activity: int | None


class AmountIn(BaseModel):
    identity: str
    amount: int


class TransferIn(BaseModel):
    recipient: str
    amount: int


class TransferOut(BaseModel):
    sender: PointsAccountOut
    recipient: PointsAccountOut


class TotalsOut(BaseModel):
    issued: int
    deducted: int
    redeemed: int
    circulating: int


# Registered before /{identity} so "totals" is not read as an identity.
@router.get("/totals", response_model=TotalsOut)
def get_totals(ledger: LedgerDep) -> TotalsOut:
    totals = ledger.points.totals()
    return TotalsOut(
        issued=totals.issued,
        deducted=totals.deducted,
        redeemed=totals.redeemed,
        circulating=totals.circulating,
    )


@router.get("/{identity}", response_model=PointsAccountOut)
def get_stats(identity: str, ledger: LedgerDep) -> PointsAccountOut:
    return PointsAccountOut.model_validate(ledger.points.get_stats(identity))


@router.post("/award", response_model=PointsAccountOut)
def award_points(body: AmountIn, ctx: ContextDep, ledger: LedgerDep) -> PointsAccountOut:
    account = ledger.points.award(ctx, body.identity, body.amount)
    return PointsAccountOut.model_validate(account)


@router.post("/deduct", response_model=PointsAccountOut)
def deduct_points(
    body: AmountIn, ctx: ContextDep, ledger: LedgerDep
) -> PointsAccountOut:
    account = ledger.points.deduct(ctx, body.identity, body.amount)
    return PointsAccountOut.model_validate(account)


@router.post("/transfer", response_model=TransferOut)
def transfer_points(body: TransferIn, ctx: ContextDep, ledger: LedgerDep) -> TransferOut:
    sender, recipient = ledger.points.transfer_points(ctx, body.recipient, body.amount)
    return TransferOut(
        sender=PointsAccountOut.model_validate(sender),
        recipient=PointsAccountOut.model_validate(recipient),
    )
