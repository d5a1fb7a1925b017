"""SQLAlchemy ORM models for the hosted PostgreSQL store."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    Date,
    DateTime,
    Boolean,
    ForeignKey,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class MortgageRecord(Base):
    __tablename__ = "mortgages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3))  # Annual, percent
    start_date: Mapped[date] = mapped_column(Date)
    term_months: Mapped[int] = mapped_column(Integer)
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    conditions: Mapped[list["MortgageConditionRecord"]] = relationship(
        back_populates="mortgage", cascade="all, delete-orphan"
    )
    bonifications: Mapped[list["MortgageBonificationRecord"]] = relationship(
        back_populates="mortgage", cascade="all, delete-orphan"
    )
    shares: Mapped[list["MortgageShareRecord"]] = relationship(
        back_populates="mortgage", cascade="all, delete-orphan"
    )
    payments: Mapped[list["PaymentRecord"]] = relationship(
        back_populates="mortgage", cascade="all, delete-orphan"
    )


class MortgageConditionRecord(Base):
    __tablename__ = "mortgage_conditions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    mortgage_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgages.id"), index=True)

    condition_type: Mapped[str] = mapped_column(String(50))
    start_month: Mapped[int] = mapped_column(Integer)
    end_month: Mapped[int] = mapped_column(Integer)
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 3), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    mortgage: Mapped["MortgageRecord"] = relationship(back_populates="conditions")


class MortgageBonificationRecord(Base):
    __tablename__ = "mortgage_bonifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    mortgage_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgages.id"), index=True)

    bonification_type: Mapped[str] = mapped_column(String(50))
    rate_reduction: Mapped[Decimal] = mapped_column(Numeric(6, 3))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    mortgage: Mapped["MortgageRecord"] = relationship(back_populates="bonifications")


class MortgageShareRecord(Base):
    __tablename__ = "mortgage_shares"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    mortgage_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgages.id"), index=True)

    user_role: Mapped[str] = mapped_column(String(20))  # "lender" or "borrower"
    initial_share_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    initial_share_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    amortized_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)

    mortgage: Mapped["MortgageRecord"] = relationship(back_populates="shares")
    requests: Mapped[list["AmortizationRequestRecord"]] = relationship(back_populates="share")


class PaymentRecord(Base):
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    mortgage_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgages.id"), index=True)

    payment_date: Mapped[date] = mapped_column(Date)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    principal: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    interest: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    extra_payment: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    remaining_balance: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    payment_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    mortgage: Mapped["MortgageRecord"] = relationship(back_populates="payments")


class AmortizationRequestRecord(Base):
    __tablename__ = "amortization_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    mortgage_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgages.id"), index=True)
    share_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgage_shares.id"))

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    status: Mapped[str] = mapped_column(String(20), default="pending")
    requested_by: Mapped[str] = mapped_column(String(255))
    reviewed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    share: Mapped["MortgageShareRecord"] = relationship(back_populates="requests")
