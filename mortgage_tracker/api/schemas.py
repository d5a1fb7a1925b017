"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from mortgage_tracker.models.mortgage import (
    BonificationType,
    ConditionType,
    Mortgage,
    MortgageBonification,
    MortgageCondition,
    MortgageShare,
    RequestStatus,
    UserRole,
)
from mortgage_tracker.models.results import PayoffStrategy


# ---- Request schemas ----

class MortgageInput(BaseModel):
    total_amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., ge=0, description="Annual nominal rate, percent")
    start_date: date
    term_months: int = Field(..., gt=0)
    monthly_payment: Decimal = Decimal("0")

    def to_domain(self) -> Mortgage:
        return Mortgage(
            total_amount=self.total_amount,
            interest_rate=self.interest_rate,
            start_date=self.start_date,
            term_months=self.term_months,
            monthly_payment=self.monthly_payment,
        )


class ConditionInput(BaseModel):
    start_month: int = Field(..., ge=1)
    end_month: int = Field(..., ge=1)
    interest_rate: Decimal | None = None
    condition_type: ConditionType = ConditionType.OTHER
    description: str | None = None

    def to_domain(self) -> MortgageCondition:
        return MortgageCondition(
            start_month=self.start_month,
            end_month=self.end_month,
            interest_rate=self.interest_rate,
            condition_type=self.condition_type,
            description=self.description,
        )


class BonificationInput(BaseModel):
    rate_reduction: Decimal = Field(..., ge=0)
    is_active: bool = True
    bonification_type: BonificationType = BonificationType.OTHER
    description: str | None = None

    def to_domain(self) -> MortgageBonification:
        return MortgageBonification(
            rate_reduction=self.rate_reduction,
            is_active=self.is_active,
            bonification_type=self.bonification_type,
            description=self.description,
        )


class ShareInput(BaseModel):
    user_role: UserRole
    initial_share_percentage: Decimal = Field(..., gt=0, le=100)
    initial_share_amount: Decimal = Field(..., ge=0)
    amortized_amount: Decimal = Field(Decimal("0"), ge=0)

    def to_domain(self) -> MortgageShare:
        return MortgageShare(
            user_role=self.user_role,
            initial_share_percentage=self.initial_share_percentage,
            initial_share_amount=self.initial_share_amount,
            amortized_amount=self.amortized_amount,
        )


class BonificationUpdate(BaseModel):
    is_active: bool


class ScheduleRequest(BaseModel):
    mortgage: MortgageInput
    conditions: list[ConditionInput] = []
    bonifications: list[BonificationInput] = []


class SimulationRequest(ScheduleRequest):
    extra_amount: Decimal
    after_payment_number: int = 0
    strategy: PayoffStrategy = PayoffStrategy.REDUCE_TERM


class MortgageCreate(BaseModel):
    display_name: str | None = None
    total_amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., ge=0)
    start_date: date
    term_months: int = Field(..., gt=0)
    notes: str | None = None


class PaymentCreate(BaseModel):
    payment_date: date
    amount: Decimal
    principal: Decimal | None = None
    interest: Decimal | None = None
    extra_payment: Decimal | None = None
    remaining_balance: Decimal | None = None
    payment_number: int | None = None
    notes: str | None = None


class AmortizationRequestCreate(BaseModel):
    amount: Decimal
    role: UserRole
    after_payment_number: int | None = Field(
        None, ge=0, description="Defaults to the number of payments recorded so far"
    )


# ---- Response schemas ----

class AmortizationPaymentResponse(BaseModel):
    payment_number: int
    date: date
    principal: Decimal
    interest: Decimal
    total_payment: Decimal
    remaining_balance: Decimal
    interest_rate: Decimal


class ScheduleSummaryResponse(BaseModel):
    total_principal: Decimal
    total_interest: Decimal
    total_payments: Decimal
    number_of_payments: int


class ScheduleResponse(BaseModel):
    payments: list[AmortizationPaymentResponse]
    summary: ScheduleSummaryResponse


class SimulationResponse(BaseModel):
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
    new_schedule: list[AmortizationPaymentResponse]


class MortgageResponse(BaseModel):
    id: UUID
    display_name: str | None = None
    total_amount: Decimal
    interest_rate: Decimal
    start_date: date
    term_months: int
    monthly_payment: Decimal
    notes: str | None = None


class OverviewResponse(BaseModel):
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


class PaymentResponse(PaymentCreate):
    id: UUID


class AmortizationRequestResponse(BaseModel):
    id: UUID
    share_id: UUID
    amount: Decimal
    status: RequestStatus
    requested_by: str
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class ConditionResponse(ConditionInput):
    id: UUID


class BonificationResponse(BonificationInput):
    id: UUID


class ShareResponse(ShareInput):
    id: UUID
