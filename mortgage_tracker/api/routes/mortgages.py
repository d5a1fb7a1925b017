"""Stored mortgage routes: records, schedule, overview and payments."""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from mortgage_tracker.api.deps import get_current_user, get_repository
from mortgage_tracker.api.routes.engine import schedule_to_response
from mortgage_tracker.api.schemas import (
    MortgageCreate,
    MortgageResponse,
    OverviewResponse,
    PaymentCreate,
    PaymentResponse,
    ScheduleResponse,
)
from mortgage_tracker.data.auth import AuthUser
from mortgage_tracker.data.repository import MortgageRepository
from mortgage_tracker.engine.amortization import build_schedule, initial_monthly_payment
from mortgage_tracker.engine.overview import mortgage_overview
from mortgage_tracker.models.mortgage import Mortgage, MortgageBundle, Payment

router = APIRouter(prefix="/api/v1/mortgages", tags=["mortgages"])


async def load_bundle_or_404(repo: MortgageRepository, mortgage_id: UUID, user: AuthUser) -> MortgageBundle:
    bundle = await repo.load_bundle(mortgage_id)
    if bundle is None or bundle.mortgage.user_id != user.id:
        raise HTTPException(status_code=404, detail="Mortgage not found")
    return bundle


async def get_mortgage_or_404(repo: MortgageRepository, mortgage_id: UUID, user: AuthUser) -> Mortgage:
    """Mortgages owned by another user are reported as missing."""
    mortgage = await repo.get_mortgage(mortgage_id)
    if mortgage is None or mortgage.user_id != user.id:
        raise HTTPException(status_code=404, detail="Mortgage not found")
    return mortgage


def _mortgage_response(mortgage: Mortgage) -> MortgageResponse:
    return MortgageResponse(**{k: v for k, v in asdict(mortgage).items() if k != "user_id"})


@router.get("", response_model=list[MortgageResponse])
async def list_mortgages(
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    return [_mortgage_response(m) for m in await repo.list_mortgages(user.id)]


@router.post("", response_model=MortgageResponse, status_code=201)
async def create_mortgage(
    req: MortgageCreate,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    mortgage = Mortgage(
        display_name=req.display_name,
        total_amount=req.total_amount,
        interest_rate=req.interest_rate,
        start_date=req.start_date,
        term_months=req.term_months,
        monthly_payment=initial_monthly_payment(req.total_amount, req.interest_rate, req.term_months),
        notes=req.notes,
    )
    return _mortgage_response(await repo.create_mortgage(user.id, mortgage))


@router.get("/{mortgage_id}/schedule", response_model=ScheduleResponse)
async def mortgage_schedule(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    bundle = await load_bundle_or_404(repo, mortgage_id, user)
    return schedule_to_response(
        build_schedule(bundle.mortgage, bundle.conditions, bundle.bonifications)
    )


@router.get("/{mortgage_id}/overview", response_model=OverviewResponse)
async def overview(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    bundle = await load_bundle_or_404(repo, mortgage_id, user)
    result = mortgage_overview(
        bundle.mortgage, bundle.conditions, bundle.bonifications, bundle.payments
    )
    return OverviewResponse(**asdict(result))


@router.get("/{mortgage_id}/payments", response_model=list[PaymentResponse])
async def list_payments(
    mortgage_id: UUID,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    bundle = await load_bundle_or_404(repo, mortgage_id, user)
    return [PaymentResponse(**asdict(p)) for p in bundle.payments]


@router.post("/{mortgage_id}/payments", response_model=PaymentResponse, status_code=201)
async def add_payment(
    mortgage_id: UUID,
    req: PaymentCreate,
    user: AuthUser = Depends(get_current_user),
    repo: MortgageRepository = Depends(get_repository),
):
    await get_mortgage_or_404(repo, mortgage_id, user)
    payment = await repo.add_payment(mortgage_id, Payment(**req.model_dump()))
    return PaymentResponse(**asdict(payment))
