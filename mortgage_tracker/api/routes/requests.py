"""Early payoff (amortization) request workflow.

A party asks to pay down part of its share; the other party approves or
rejects. Requested amounts are bounded by the requester's remaining debt.
"""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from mortgage_tracker.api.deps import get_current_user, get_repository
from mortgage_tracker.api.routes.mortgages import get_mortgage_or_404, load_bundle_or_404
from mortgage_tracker.api.schemas import AmortizationRequestCreate, AmortizationRequestResponse
from mortgage_tracker.data.auth import AuthUser
from mortgage_tracker.data.repository import MortgageRepository
from mortgage_tracker.engine.amortization import build_schedule
from mortgage_tracker.engine.shares import find_share, share_position, validate_request_amount

router = APIRouter(prefix="/api/v1", tags=["amortization-requests"])


@router.get(
    "/mortgages/{mortgage_id}/amortization-requests",
    response_model=list[AmortizationRequestResponse],
)
async def list_requests(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    return [AmortizationRequestResponse(**asdict(r)) for r in await repo.list_requests(mortgage_id)]


@router.post(
    "/mortgages/{mortgage_id}/amortization-requests",
    response_model=AmortizationRequestResponse,
    status_code=201,
)
async def create_request(
    mortgage_id: UUID,
    req: AmortizationRequestCreate,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    bundle = await load_bundle_or_404(repo, mortgage_id, user)
    share = find_share(bundle.shares, req.role)
    if share is None:
        raise HTTPException(status_code=400, detail=f"No {req.role.value} share configured")

    schedule = build_schedule(bundle.mortgage, bundle.conditions, bundle.bonifications)
    after = req.after_payment_number
    if after is None:
        after = len(bundle.payments)
    after = min(after, len(schedule))

    position = share_position(bundle.mortgage, schedule, bundle.shares, req.role, after)
    try:
        validate_request_amount(req.amount, position.remaining_debt)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    created = await repo.create_request(mortgage_id, share.id, req.amount, user.email or user.id)
    return AmortizationRequestResponse(**asdict(created))


async def _review(repo: MortgageRepository, request_id: UUID, user: AuthUser, approve: bool):
    if not user.email:
        raise HTTPException(status_code=400, detail="Reviewer has no email address")
    pending = await repo.get_request(request_id)
    if pending is None:
        raise HTTPException(status_code=404, detail="Request not found")
    await get_mortgage_or_404(repo, pending.mortgage_id, user)

    try:
        if approve:
            reviewed = await repo.approve_request(request_id, user.email)
        else:
            reviewed = await repo.reject_request(request_id, user.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if reviewed is None:
        raise HTTPException(status_code=404, detail="Request not found")
    return AmortizationRequestResponse(**asdict(reviewed))


@router.post("/amortization-requests/{request_id}/approve", response_model=AmortizationRequestResponse)
async def approve_request(
    request_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    return await _review(repo, request_id, user, approve=True)


@router.post("/amortization-requests/{request_id}/reject", response_model=AmortizationRequestResponse)
async def reject_request(
    request_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    return await _review(repo, request_id, user, approve=False)
