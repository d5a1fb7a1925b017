"""Mortgage domain records as supplied by the persistence layer.

Rates are annual percentages (3.5 means 3.5%), money is Decimal.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ConditionType(str, Enum):
    GRACE_PERIOD = "grace_period"
    FIXED_RATE = "fixed_rate"
    VARIABLE_RATE = "variable_rate"
    PROMOTIONAL = "promotional"
    OTHER = "other"


class BonificationType(str, Enum):
    PAYROLL = "payroll"
    HOME_INSURANCE = "home_insurance"
    LIFE_INSURANCE = "life_insurance"
    PENSION_PLAN = "pension_plan"
    CARDS = "cards"
    OTHER = "other"


class UserRole(str, Enum):
    LENDER = "lender"
    BORROWER = "borrower"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Mortgage:
    total_amount: Decimal
    interest_rate: Decimal  # Annual, percent
    start_date: date
    term_months: int
    monthly_payment: Decimal = Decimal("0")  # Informational; engine recomputes
    id: UUID | None = None
    user_id: str | None = None
    display_name: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MortgageCondition:
    """Rate override for the inclusive, 1-indexed month range [start_month, end_month]."""
    start_month: int
    end_month: int
    interest_rate: Decimal | None  # None = no rate override, ignored by the engine
    condition_type: ConditionType = ConditionType.OTHER
    description: str | None = None
    id: UUID | None = None
    mortgage_id: UUID | None = None


@dataclass(frozen=True)
class MortgageBonification:
    rate_reduction: Decimal  # Annual, percentage points
    is_active: bool = True
    bonification_type: BonificationType = BonificationType.OTHER
    description: str | None = None
    id: UUID | None = None
    mortgage_id: UUID | None = None


@dataclass(frozen=True)
class MortgageShare:
    user_role: UserRole
    initial_share_percentage: Decimal
    initial_share_amount: Decimal
    amortized_amount: Decimal = Decimal("0")
    id: UUID | None = None
    mortgage_id: UUID | None = None


@dataclass(frozen=True)
class Payment:
    """A payment actually recorded against the mortgage."""
    payment_date: date
    amount: Decimal
    principal: Decimal | None = None
    interest: Decimal | None = None
    extra_payment: Decimal | None = None
    remaining_balance: Decimal | None = None
    payment_number: int | None = None
    notes: str | None = None
    id: UUID | None = None
    mortgage_id: UUID | None = None


@dataclass(frozen=True)
class AmortizationRequest:
    share_id: UUID
    amount: Decimal
    requested_by: str
    status: RequestStatus = RequestStatus.PENDING
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
    id: UUID | None = None
    mortgage_id: UUID | None = None


@dataclass(frozen=True)
class MortgageBundle:
    """Everything known about one mortgage, loaded together."""
    mortgage: Mortgage
    conditions: list[MortgageCondition]
    bonifications: list[MortgageBonification]
    shares: list[MortgageShare]
    payments: list[Payment]
