"""Rate conditions, bonifications and ownership shares of a stored mortgage."""

import logging
from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from mortgage_tracker.api.deps import get_current_user, get_repository
from mortgage_tracker.api.routes.mortgages import get_mortgage_or_404
from mortgage_tracker.api.schemas import (
    BonificationInput,
    BonificationResponse,
    BonificationUpdate,
    ConditionInput,
    ConditionResponse,
    ShareInput,
    ShareResponse,
)
from mortgage_tracker.data.auth import AuthUser
from mortgage_tracker.data.repository import MortgageRepository
from mortgage_tracker.engine.shares import find_share

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["terms"])


# ---- Conditions ----

@router.get("/mortgages/{mortgage_id}/conditions", response_model=list[ConditionResponse])
async def list_conditions(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    return [ConditionResponse(**asdict(c)) for c in await repo.list_conditions(mortgage_id)]


@router.post("/mortgages/{mortgage_id}/conditions", response_model=ConditionResponse, status_code=201)
async def add_condition(
    mortgage_id: UUID,
    req: ConditionInput,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    if req.end_month < req.start_month:
        raise HTTPException(status_code=400, detail="end_month must not precede start_month")
    condition = await repo.add_condition(mortgage_id, req.to_domain())
    return ConditionResponse(**asdict(condition))


@router.delete("/conditions/{condition_id}", status_code=204)
async def delete_condition(
    condition_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    condition = await repo.get_condition(condition_id)
    if condition is None:
        raise HTTPException(status_code=404, detail="Condition not found")
    await get_mortgage_or_404(repo, condition.mortgage_id, user)
    await repo.delete_condition(condition_id)
    logger.info("Deleted condition %s of mortgage %s", condition_id, condition.mortgage_id)


# ---- Bonifications ----

@router.get("/mortgages/{mortgage_id}/bonifications", response_model=list[BonificationResponse])
async def list_bonifications(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    return [BonificationResponse(**asdict(b)) for b in await repo.list_bonifications(mortgage_id)]


@router.post("/mortgages/{mortgage_id}/bonifications", response_model=BonificationResponse, status_code=201)
async def add_bonification(
    mortgage_id: UUID,
    req: BonificationInput,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    bonification = await repo.add_bonification(mortgage_id, req.to_domain())
    return BonificationResponse(**asdict(bonification))


@router.patch("/bonifications/{bonification_id}", response_model=BonificationResponse)
async def update_bonification(
    bonification_id: UUID,
    req: BonificationUpdate,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    """Switch a bonification on or off; inactive ones no longer lower the rate."""
    bonification = await repo.get_bonification(bonification_id)
    if bonification is None:
        raise HTTPException(status_code=404, detail="Bonification not found")
    await get_mortgage_or_404(repo, bonification.mortgage_id, user)
    updated = await repo.set_bonification_active(bonification_id, req.is_active)
    return BonificationResponse(**asdict(updated))


# ---- Shares ----

@router.get("/mortgages/{mortgage_id}/shares", response_model=list[ShareResponse])
async def list_shares(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    return [ShareResponse(**asdict(s)) for s in await repo.list_shares(mortgage_id)]


@router.post("/mortgages/{mortgage_id}/shares", response_model=ShareResponse, status_code=201)
async def add_share(
    mortgage_id: UUID,
    req: ShareInput,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    shares = await repo.list_shares(mortgage_id)
    # One share per role
    if find_share(shares, req.user_role) is not None:
        raise HTTPException(status_code=400, detail=f"A {req.user_role.value} share already exists")
    if sum(s.initial_share_percentage for s in shares) + req.initial_share_percentage > 100:
        raise HTTPException(status_code=400, detail="Share percentages exceed 100")
    share = await repo.add_share(mortgage_id, req.to_domain())
    return ShareResponse(**asdict(share))
