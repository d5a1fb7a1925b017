"""Stateless schedule and simulation routes."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from mortgage_tracker.api.schemas import (
    AmortizationPaymentResponse,
    ScheduleRequest,
    ScheduleResponse,
    ScheduleSummaryResponse,
    SimulationRequest,
    SimulationResponse,
)
from mortgage_tracker.engine.amortization import build_schedule, schedule_summary
from mortgage_tracker.engine.early_payoff import simulate_early_payoff
from mortgage_tracker.models.results import AmortizationPayment, EarlyPayoffSimulation

router = APIRouter(prefix="/api/v1", tags=["engine"])


def schedule_to_response(schedule: list[AmortizationPayment]) -> ScheduleResponse:
    return ScheduleResponse(
        payments=[AmortizationPaymentResponse(**asdict(p)) for p in schedule],
        summary=ScheduleSummaryResponse(**asdict(schedule_summary(schedule))),
    )


def simulation_to_response(simulation: EarlyPayoffSimulation) -> SimulationResponse:
    return SimulationResponse(**asdict(simulation))


@router.post("/schedule", response_model=ScheduleResponse)
async def schedule(req: ScheduleRequest):
    """Amortization schedule for an ad-hoc mortgage."""
    payments = build_schedule(
        req.mortgage.to_domain(),
        [c.to_domain() for c in req.conditions],
        [b.to_domain() for b in req.bonifications],
    )
    return schedule_to_response(payments)


@router.post("/simulate", response_model=SimulationResponse)
async def simulate(req: SimulationRequest):
    """Early payoff what-if for an ad-hoc mortgage."""
    if req.extra_amount <= 0:
        raise HTTPException(status_code=400, detail="extra_amount must be positive")
    try:
        simulation = simulate_early_payoff(
            req.mortgage.to_domain(),
            [c.to_domain() for c in req.conditions],
            [b.to_domain() for b in req.bonifications],
            req.extra_amount,
            req.after_payment_number,
            req.strategy,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return simulation_to_response(simulation)
