"""Amortization schedule computation for variable-rate mortgages.

Pure functions: Decimal in, dataclass out. No I/O.

Every emitted money field is rounded to cents at the line where it is
computed; the running balance keeps full precision between months.
"""

import calendar
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from mortgage_tracker.models.mortgage import Mortgage, MortgageBonification, MortgageCondition
from mortgage_tracker.models.results import AmortizationPayment, ScheduleSummary

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
# Balances at or below one cent are considered paid off
PAID_OFF_THRESHOLD = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's end."""
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def total_bonification(bonifications: Iterable[MortgageBonification]) -> Decimal:
    """Sum of rate reductions from active bonifications."""
    return sum((b.rate_reduction for b in bonifications if b.is_active), ZERO)


class RateResolver:
    """Effective annual rate for any month of a mortgage.

    Conditions with no rate are dropped, the rest are consulted in ascending
    start_month order and the first one covering the month wins. Bonifications
    are subtracted afterwards and the result never goes below zero.
    """

    def __init__(
        self,
        mortgage: Mortgage,
        conditions: Iterable[MortgageCondition] = (),
        bonifications: Iterable[MortgageBonification] = (),
    ):
        self.base_rate = mortgage.interest_rate
        self.conditions = sorted(
            (c for c in conditions if c.interest_rate is not None),
            key=lambda c: c.start_month,
        )
        self.bonification = total_bonification(bonifications)

    def base_rate_for_month(self, month: int) -> Decimal:
        for condition in self.conditions:
            if condition.start_month <= month <= condition.end_month:
                return condition.interest_rate
        return self.base_rate

    def rate_for_month(self, month: int) -> Decimal:
        return max(ZERO, self.base_rate_for_month(month) - self.bonification)

    def run_end(self, start_month: int, last_month: int) -> int:
        """Last month of the run of identical rates beginning at start_month."""
        rate = self.rate_for_month(start_month)
        end = start_month
        while end < last_month and self.rate_for_month(end + 1) == rate:
            end += 1
        return end


def monthly_rate(annual_rate: Decimal) -> Decimal:
    return annual_rate / 100 / 12


def monthly_payment(principal: Decimal, annual_rate: Decimal, months: int) -> Decimal:
    """Unrounded annuity payment retiring principal over months.

    M = P * [r(1+r)^n] / [(1+r)^n - 1], or P / n when the rate is zero.
    """
    if annual_rate == 0:
        return principal / months
    r = monthly_rate(annual_rate)
    factor = (1 + r) ** months
    return principal * r * factor / (factor - 1)


def initial_monthly_payment(total_amount: Decimal, interest_rate: Decimal, term_months: int) -> Decimal:
    """Payment stored on a new mortgage record, for display only."""
    return round2(monthly_payment(total_amount, interest_rate, term_months))


def make_payment_line(
    mortgage: Mortgage,
    payment_number: int,
    balance: Decimal,
    annual_rate: Decimal,
    payment: Decimal,
    settle: bool = False,
) -> tuple[AmortizationPayment, Decimal]:
    """Apply one month's payment to balance.

    Returns the rounded schedule line and the new full-precision balance.
    With settle=True the whole outstanding balance is paid this month.
    """
    if annual_rate == 0:
        interest = ZERO
        principal = payment
    else:
        interest = balance * monthly_rate(annual_rate)
        principal = payment - interest
    total = payment

    if principal > balance or settle:
        principal = balance
        total = principal + interest

    balance -= principal
    line = AmortizationPayment(
        payment_number=payment_number,
        date=add_months(mortgage.start_date, payment_number - 1),
        principal=round2(principal),
        interest=round2(interest),
        total_payment=round2(total),
        remaining_balance=max(ZERO, round2(balance)),
        interest_rate=annual_rate,
    )
    return line, balance


def build_schedule(
    mortgage: Mortgage,
    conditions: Iterable[MortgageCondition] = (),
    bonifications: Iterable[MortgageBonification] = (),
) -> list[AmortizationPayment]:
    """Month-by-month schedule with re-amortization at every rate change.

    The payment of each run of equal rates is computed from the balance at
    the start of the run over all months left in the loan, not just the run.
    The schedule stops early once the balance is paid off.
    """
    resolver = RateResolver(mortgage, conditions, bonifications)
    term = mortgage.term_months

    payments: list[AmortizationPayment] = []
    balance = mortgage.total_amount
    remaining_months = term
    month = 1

    while month <= term and balance > PAID_OFF_THRESHOLD:
        rate = resolver.rate_for_month(month)
        run_end = resolver.run_end(month, term)
        payment = monthly_payment(balance, rate, remaining_months)

        for payment_number in range(month, run_end + 1):
            if balance <= PAID_OFF_THRESHOLD:
                break
            line, balance = make_payment_line(mortgage, payment_number, balance, rate, payment)
            payments.append(line)
            remaining_months -= 1

        month = run_end + 1

    return payments


def schedule_summary(schedule: list[AmortizationPayment]) -> ScheduleSummary:
    """Totals over already-rounded lines, each rounded again to cents."""
    return ScheduleSummary(
        total_principal=round2(sum((p.principal for p in schedule), ZERO)),
        total_interest=round2(sum((p.interest for p in schedule), ZERO)),
        total_payments=round2(sum((p.total_payment for p in schedule), ZERO)),
        number_of_payments=len(schedule),
    )


def yearly_summary(schedule: list[AmortizationPayment]) -> list[dict[str, Decimal]]:
    """Aggregate a schedule by loan year.

    Returns list of dicts with keys: year, principal, interest, total_payment, ending_balance
    """
    yearly: list[dict[str, Decimal]] = []
    year_principal = ZERO
    year_interest = ZERO
    year_total = ZERO

    for p in schedule:
        year_principal += p.principal
        year_interest += p.interest
        year_total += p.total_payment

        if p.payment_number % 12 == 0 or p is schedule[-1]:
            yearly.append({
                "year": Decimal((p.payment_number - 1) // 12 + 1),
                "principal": year_principal,
                "interest": year_interest,
                "total_payment": year_total,
                "ending_balance": p.remaining_balance,
            })
            year_principal = ZERO
            year_interest = ZERO
            year_total = ZERO

    return yearly
