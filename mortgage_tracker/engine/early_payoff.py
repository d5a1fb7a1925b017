"""Early-payoff ("amortización anticipada") simulation.

Given an extra principal payment made right after a given payment number,
rebuilds the rest of the schedule under one of two strategies and compares
it with the baseline:

    reduce_payment: the remaining term is kept, the monthly payment drops.
    reduce_term:    the monthly payment is kept, the term gets shorter.

Pure functions: Decimal in, dataclass out. No I/O.
"""

import math
from collections.abc import Iterable
from decimal import Decimal

from mortgage_tracker.engine.amortization import (
    PAID_OFF_THRESHOLD,
    ZERO,
    RateResolver,
    build_schedule,
    make_payment_line,
    monthly_payment,
    monthly_rate,
    round2,
    schedule_summary,
)
from mortgage_tracker.models.mortgage import Mortgage, MortgageBonification, MortgageCondition
from mortgage_tracker.models.results import AmortizationPayment, EarlyPayoffSimulation, PayoffStrategy


def balance_after_payment(
    mortgage: Mortgage,
    schedule: list[AmortizationPayment],
    payment_number: int,
) -> Decimal:
    """Outstanding balance right after payment_number (0 = before any payment)."""
    if payment_number == 0:
        return mortgage.total_amount
    for p in schedule:
        if p.payment_number == payment_number:
            return p.remaining_balance
    return mortgage.total_amount


def payment_at(schedule: list[AmortizationPayment], payment_number: int) -> Decimal:
    """Amount charged at payment_number, or the first payment when out of range."""
    for p in schedule:
        if p.payment_number == payment_number:
            return p.total_payment
    return schedule[0].total_payment if schedule else ZERO


def months_to_repay(balance: Decimal, payment: Decimal, annual_rate: Decimal) -> int | None:
    """Whole months a fixed payment needs to retire balance.

    n = ceil(log(P / (P - L*r)) / log(1 + r)). Returns None when the payment
    does not cover a single month's interest.
    """
    if payment <= 0:
        return None
    if annual_rate == 0:
        return math.ceil(balance / payment)
    r = monthly_rate(annual_rate)
    headroom = payment - balance * r
    if headroom <= 0:
        return None
    n = (payment / headroom).ln() / (1 + r).ln()
    return max(1, math.ceil(n))


def _regenerate_tail(
    mortgage: Mortgage,
    resolver: RateResolver,
    balance: Decimal,
    after_payment_number: int,
    months: int,
    fixed_payment: Decimal | None,
) -> list[AmortizationPayment]:
    """Payments after the extra one, re-deriving each month's rate.

    With fixed_payment the same amount is charged every month; without it the
    payment is recomputed monthly from the balance and the months left.
    The final month settles whatever balance remains.
    """
    tail: list[AmortizationPayment] = []
    for i in range(months):
        if balance <= PAID_OFF_THRESHOLD:
            break
        payment_number = after_payment_number + 1 + i
        rate = resolver.rate_for_month(payment_number)
        months_left = months - i
        if fixed_payment is None:
            payment = monthly_payment(balance, rate, months_left)
        else:
            payment = fixed_payment
        line, balance = make_payment_line(
            mortgage, payment_number, balance, rate, payment, settle=months_left == 1,
        )
        tail.append(line)
    return tail


def simulate_early_payoff(
    mortgage: Mortgage,
    conditions: Iterable[MortgageCondition],
    bonifications: Iterable[MortgageBonification],
    extra_amount: Decimal,
    after_payment_number: int,
    strategy: PayoffStrategy = PayoffStrategy.REDUCE_TERM,
) -> EarlyPayoffSimulation:
    """Compare the baseline schedule with one where extra_amount is paid early.

    Callers must pass a positive extra_amount. after_payment_number must lie
    between 0 and the length of the baseline schedule.
    """
    conditions = list(conditions)
    bonifications = list(bonifications)
    strategy = PayoffStrategy(strategy)

    baseline = build_schedule(mortgage, conditions, bonifications)
    baseline_summary = schedule_summary(baseline)

    if not 0 <= after_payment_number <= len(baseline):
        raise ValueError(
            f"after_payment_number must be between 0 and {len(baseline)}, got {after_payment_number}"
        )

    balance_before_extra = balance_after_payment(mortgage, baseline, after_payment_number)
    new_balance = max(ZERO, balance_before_extra - extra_amount)

    prefix = [p for p in baseline if p.payment_number <= after_payment_number]
    original_remaining = sum(1 for p in baseline if p.payment_number > after_payment_number)
    original_payment = payment_at(baseline, after_payment_number)

    if new_balance <= 0:
        interest_to_date = schedule_summary(prefix).total_interest
        return EarlyPayoffSimulation(
            strategy=strategy,
            extra_payment_amount=extra_amount,
            after_payment_number=after_payment_number,
            balance_before_extra=balance_before_extra,
            new_balance=ZERO,
            original_total_interest=baseline_summary.total_interest,
            new_total_interest=interest_to_date,
            original_remaining_payments=original_remaining,
            new_remaining_payments=0,
            original_monthly_payment=original_payment,
            new_monthly_payment=ZERO,
            interest_saved=round2(baseline_summary.total_interest - interest_to_date),
            months_saved=original_remaining,
            new_schedule=prefix,
        )

    resolver = RateResolver(mortgage, conditions, bonifications)
    rate = resolver.rate_for_month(after_payment_number + 1)
    fixed_term = mortgage.term_months - after_payment_number

    if strategy is PayoffStrategy.REDUCE_PAYMENT:
        fixed_payment = monthly_payment(new_balance, rate, fixed_term)
        tail = _regenerate_tail(
            mortgage, resolver, new_balance, after_payment_number, fixed_term, fixed_payment,
        )
    else:
        new_term = months_to_repay(new_balance, original_payment, rate)
        if new_term is None:
            # Payment cannot even cover interest: keep the original remaining term
            new_term = fixed_term
        tail = _regenerate_tail(
            mortgage, resolver, new_balance, after_payment_number, new_term, None,
        )

    new_schedule = prefix + tail
    new_summary = schedule_summary(new_schedule)

    return EarlyPayoffSimulation(
        strategy=strategy,
        extra_payment_amount=extra_amount,
        after_payment_number=after_payment_number,
        balance_before_extra=balance_before_extra,
        new_balance=round2(new_balance),
        original_total_interest=baseline_summary.total_interest,
        new_total_interest=new_summary.total_interest,
        original_remaining_payments=original_remaining,
        new_remaining_payments=len(tail),
        original_monthly_payment=original_payment,
        new_monthly_payment=tail[0].total_payment if tail else ZERO,
        interest_saved=round2(baseline_summary.total_interest - new_summary.total_interest),
        months_saved=original_remaining - len(tail),
        new_schedule=new_schedule,
    )
