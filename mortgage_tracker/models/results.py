from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class PayoffStrategy(str, Enum):
    REDUCE_PAYMENT = "reduce_payment"  # Keep the term, lower the monthly payment
    REDUCE_TERM = "reduce_term"        # Keep the payment, shorten the term


@dataclass(frozen=True)
class AmortizationPayment:
    payment_number: int
    date: date
    principal: Decimal
    interest: Decimal
    total_payment: Decimal
    remaining_balance: Decimal
    interest_rate: Decimal  # Effective annual rate for the month, percent


@dataclass(frozen=True)
class ScheduleSummary:
    total_principal: Decimal
    total_interest: Decimal
    total_payments: Decimal
    number_of_payments: int


@dataclass(frozen=True)
class EarlyPayoffSimulation:
    strategy: PayoffStrategy
    extra_payment_amount: Decimal
    after_payment_number: int
    balance_before_extra: Decimal
    new_balance: Decimal

    original_total_interest: Decimal
    new_total_interest: Decimal
    original_remaining_payments: int
    new_remaining_payments: int
    original_monthly_payment: Decimal
    new_monthly_payment: Decimal

    interest_saved: Decimal
    months_saved: int

    new_schedule: list[AmortizationPayment] = field(default_factory=list)

    @property
    def is_full_payoff(self) -> bool:
        return self.new_remaining_payments == 0

    @property
    def interest_saved_per_unit(self) -> Decimal:
        """Interest saved for every unit of currency paid early."""
        if self.extra_payment_amount <= 0:
            return Decimal("0")
        return self.interest_saved / self.extra_payment_amount


@dataclass(frozen=True)
class SharePosition:
    """One party's slice of the outstanding debt at a point in the schedule."""
    remaining_balance: Decimal
    share_percentage: Decimal
    initial_share_amount: Decimal
    amortized_amount: Decimal
    remaining_debt: Decimal
    has_shares: bool

    def debt_after(self, extra_amount: Decimal) -> Decimal:
        return max(Decimal("0"), self.remaining_debt - extra_amount)


@dataclass(frozen=True)
class MortgageOverview:
    total_amount: Decimal
    nominal_rate: Decimal
    total_bonification: Decimal
    effective_rate: Decimal
    monthly_payment: Decimal
    start_date: date
    end_date: date
    term_years: Decimal

    total_interest: Decimal
    total_cost: Decimal

    paid_principal: Decimal
    paid_interest: Decimal
    remaining_balance: Decimal
    progress_pct: Decimal
    payments_made: int
