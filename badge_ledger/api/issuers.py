"""Authorization registry endpoints: issuers and admins.

Mutations are owner-only; the ledger enforces that, not the router.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict

from badge_ledger.api.dependencies import ContextDep, LedgerDep

router = APIRouter(tags=["authorization"])


class IssuerIn(BaseModel):
    name: str


class IssuerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identity: str
    name: str
    authorized: bool
    authorized_at: int


class AdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identity: str
    added_at: int


@router.get("/v1/issuers", response_model=list[IssuerOut])
def list_issuers(ledger: LedgerDep) -> list[IssuerOut]:
    return [IssuerOut.model_validate(i) for i in ledger.authorization.authorized_issuers()]


@router.put("/v1/issuers/{identity}", response_model=IssuerOut)
def authorize_issuer(
    identity: str, body: IssuerIn, ctx: ContextDep, ledger: LedgerDep
) -> IssuerOut:
    issuer = ledger.authorization.authorize(ctx, identity, body.name)
    return IssuerOut.model_validate(issuer)


@router.delete("/v1/issuers/{identity}", response_model=IssuerOut)
def deauthorize_issuer(identity: str, ctx: ContextDep, ledger: LedgerDep) -> IssuerOut:
    issuer = ledger.authorization.deauthorize(ctx, identity)
    return IssuerOut.model_validate(issuer)


@router.get("/v1/issuers/{identity}", response_model=IssuerOut)
def get_issuer(identity: str, ledger: LedgerDep) -> IssuerOut:
    issuer = ledger.authorization.get_issuer(identity)
    if issuer is None:
        raise HTTPException(status_code=404, detail="issuer not found")
    return IssuerOut.model_validate(issuer)


@router.get("/v1/admins", response_model=list[AdminOut])
def list_admins(_ctx: ContextDep, ledger: LedgerDep) -> list[AdminOut]:
    return [AdminOut.model_validate(a) for a in ledger.authorization.list_admins()]


@router.put(
    "/v1/admins/{identity}",
    response_model=AdminOut,
    status_code=status.HTTP_201_CREATED,
)
def add_admin(identity: str, ctx: ContextDep, ledger: LedgerDep) -> AdminOut:
    return AdminOut.model_validate(ledger.authorization.add_admin(ctx, identity))


@router.delete("/v1/admins/{identity}", status_code=status.HTTP_204_NO_CONTENT)
def remove_admin(identity: str, ctx: ContextDep, ledger: LedgerDep) -> None:
    ledger.authorization.remove_admin(ctx, identity)
