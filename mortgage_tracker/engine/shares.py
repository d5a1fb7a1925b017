"""Per-party ownership of the outstanding debt.

A lender and a borrower may each hold a percentage of the mortgage. Early
payoff requests are bounded by the requester's remaining share.
"""

from collections.abc import Iterable
from decimal import Decimal

from mortgage_tracker.engine.amortization import ZERO
from mortgage_tracker.engine.early_payoff import balance_after_payment
from mortgage_tracker.models.mortgage import Mortgage, MortgageShare, UserRole
from mortgage_tracker.models.results import AmortizationPayment, SharePosition

FULL_SHARE = Decimal("100")


def find_share(shares: Iterable[MortgageShare], role: UserRole) -> MortgageShare | None:
    for share in shares:
        if share.user_role == role:
            return share
    return None


def share_position(
    mortgage: Mortgage,
    schedule: list[AmortizationPayment],
    shares: list[MortgageShare],
    role: UserRole,
    after_payment_number: int,
) -> SharePosition:
    """Remaining debt owed by role once after_payment_number has been paid.

    Without any configured shares the whole balance is attributed to role.
    """
    remaining_balance = balance_after_payment(mortgage, schedule, after_payment_number)
    share = find_share(shares, role)

    if not shares or share is None:
        return SharePosition(
            remaining_balance=remaining_balance,
            share_percentage=FULL_SHARE,
            initial_share_amount=mortgage.total_amount,
            amortized_amount=ZERO,
            remaining_debt=remaining_balance,
            has_shares=bool(shares),
        )

    remaining_debt = max(
        ZERO,
        remaining_balance * share.initial_share_percentage / 100 - share.amortized_amount,
    )
    return SharePosition(
        remaining_balance=remaining_balance,
        share_percentage=share.initial_share_percentage,
        initial_share_amount=share.initial_share_amount,
        amortized_amount=share.amortized_amount,
        remaining_debt=remaining_debt,
        has_shares=True,
    )


def validate_request_amount(amount: Decimal, remaining_debt: Decimal) -> None:
    """Reject early payoff requests that are non-positive or exceed the debt."""
    if amount <= 0:
        raise ValueError("Amount must be positive")
    if amount > remaining_debt:
        raise ValueError(
            f"Amount {amount} exceeds remaining share of debt {remaining_debt:.2f}"
        )
