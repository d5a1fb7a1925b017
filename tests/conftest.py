"""Canonical test fixtures used across engine, data and API tests.

Fixture: 150,000 mortgage at 3.5% over 360 months, first payment Jan 2025.
"""

from datetime import date
from decimal import Decimal

import pytest

from mortgage_tracker.models.mortgage import (
    Mortgage,
    MortgageBonification,
    MortgageCondition,
    MortgageShare,
    UserRole,
)


@pytest.fixture
def canonical_mortgage() -> Mortgage:
    return Mortgage(
        total_amount=Decimal("150000"),
        interest_rate=Decimal("3.5"),
        start_date=date(2025, 1, 15),
        term_months=360,
        monthly_payment=Decimal("673.57"),
    )


@pytest.fixture
def grace_condition() -> MortgageCondition:
    """First year interest-free."""
    return MortgageCondition(start_month=1, end_month=12, interest_rate=Decimal("0"))


@pytest.fixture
def payroll_bonification() -> MortgageBonification:
    return MortgageBonification(rate_reduction=Decimal("0.5"), is_active=True)


@pytest.fixture
def split_shares() -> list[MortgageShare]:
    """Lender holds 40%, borrower 60% of which 1,000 is already paid down."""
    return [
        MortgageShare(
            user_role=UserRole.LENDER,
            initial_share_percentage=Decimal("40"),
            initial_share_amount=Decimal("60000"),
        ),
        MortgageShare(
            user_role=UserRole.BORROWER,
            initial_share_percentage=Decimal("60"),
            initial_share_amount=Decimal("90000"),
            amortized_amount=Decimal("1000"),
        ),
    ]
