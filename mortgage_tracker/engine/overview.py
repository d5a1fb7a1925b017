"""Headline figures for a mortgage: rates, totals, dates and repayment progress."""

from collections.abc import Iterable
from decimal import Decimal

from mortgage_tracker.engine.amortization import (
    ZERO,
    add_months,
    build_schedule,
    round2,
    schedule_summary,
    total_bonification,
)
from mortgage_tracker.models.mortgage import (
    Mortgage,
    MortgageBonification,
    MortgageCondition,
    Payment,
)
from mortgage_tracker.models.results import MortgageOverview


def mortgage_overview(
    mortgage: Mortgage,
    conditions: Iterable[MortgageCondition],
    bonifications: Iterable[MortgageBonification],
    payments: Iterable[Payment],
) -> MortgageOverview:
    bonifications = list(bonifications)
    payments = list(payments)

    bonification = total_bonification(bonifications)
    summary = schedule_summary(build_schedule(mortgage, conditions, bonifications))

    # Recorded payments may leave principal/interest blank
    paid_principal = sum((p.principal or ZERO for p in payments), ZERO)
    paid_interest = sum((p.interest or ZERO for p in payments), ZERO)
    progress = paid_principal / mortgage.total_amount * 100

    return MortgageOverview(
        total_amount=mortgage.total_amount,
        nominal_rate=mortgage.interest_rate,
        total_bonification=bonification,
        effective_rate=max(ZERO, mortgage.interest_rate - bonification),
        monthly_payment=mortgage.monthly_payment,
        start_date=mortgage.start_date,
        end_date=add_months(mortgage.start_date, mortgage.term_months),
        term_years=round2(Decimal(mortgage.term_months) / 12),
        total_interest=summary.total_interest,
        total_cost=round2(mortgage.total_amount + summary.total_interest),
        paid_principal=round2(paid_principal),
        paid_interest=round2(paid_interest),
        remaining_balance=round2(mortgage.total_amount - paid_principal),
        progress_pct=round2(min(progress, Decimal("100"))),
        payments_made=len(payments),
    )
