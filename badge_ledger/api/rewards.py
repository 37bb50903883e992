"""Reward catalog and redemption endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict

from badge_ledger.api.dependencies import ContextDep, LedgerDep

router = APIRouter(prefix="/v1/rewards", tags=["rewards"])


class RewardCreateIn(BaseModel):
    name: str
    description: str = ""
    cost: int
    quantity: int


class RewardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    cost: int
    available_quantity: int
    active: bool
    created_by: str
    created_at: int


class ActiveIn(BaseModel):
    active: bool


class RestockIn(BaseModel):
    quantity: int


class RedemptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: str
    sequence: int
    reward_id: int
    points_spent: int
    timestamp: int


@router.post("", response_model=RewardOut, status_code=status.HTTP_201_CREATED)
def create_reward(body: RewardCreateIn, ctx: ContextDep, ledger: LedgerDep) -> RewardOut:
    reward = ledger.rewards.create_reward(
        ctx,
        name=body.name,
        description=body.description,
        cost=body.cost,
        quantity=body.quantity,
    )
    return RewardOut.model_validate(reward)


@router.get("", response_model=list[RewardOut])
def list_rewards(ledger: LedgerDep, active_only: bool = False) -> list[RewardOut]:
    rewards = ledger.rewards.list_rewards(active_only=active_only)
    return [RewardOut.model_validate(r) for r in rewards]


@router.get("/redemptions/{identity}", response_model=list[RedemptionOut])
def list_redemptions(identity: str, ledger: LedgerDep) -> list[RedemptionOut]:
    return [RedemptionOut.model_validate(r) for r in ledger.rewards.redemptions(identity)]


@router.get("/{reward_id}", response_model=RewardOut)
def get_reward(reward_id: int, ledger: LedgerDep) -> RewardOut:
    reward = ledger.rewards.get_reward(reward_id)
    if reward is None:
        raise HTTPException(status_code=404, detail="reward not found")
    return RewardOut.model_validate(reward)


@router.patch("/{reward_id}/active", response_model=RewardOut)
def set_active(
    reward_id: int, body: ActiveIn, ctx: ContextDep, ledger: LedgerDep
) -> RewardOut:
    return RewardOut.model_validate(ledger.rewards.set_active(ctx, reward_id, body.active))


@router.post("/{reward_id}/restock", response_model=RewardOut)
def restock(
    reward_id: int, body: RestockIn, ctx: ContextDep, ledger: LedgerDep
) -> RewardOut:
    return RewardOut.model_validate(ledger.rewards.restock(ctx, reward_id, body.quantity))


@router.post(
    "/{reward_id}/redeem",
    response_model=RedemptionOut,
    status_code=status.HTTP_201_CREATED,
)
def redeem(reward_id: int, ctx: ContextDep, ledger: LedgerDep) -> RedemptionOut:
    return RedemptionOut.model_validate(ledger.rewards.redeem(ctx, reward_id))
