"""Read/write access to mortgage records in the relational store.

The engine never touches the database; routes load a MortgageBundle here and
hand plain domain objects to it.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mortgage_tracker.config import ConnectionConfig
from mortgage_tracker.models.db import (
    AmortizationRequestRecord,
    Base,
    MortgageBonificationRecord,
    MortgageConditionRecord,
    MortgageRecord,
    MortgageShareRecord,
    PaymentRecord,
)
from mortgage_tracker.models.mortgage import (
    AmortizationRequest,
    BonificationType,
    ConditionType,
    Mortgage,
    MortgageBonification,
    MortgageBundle,
    MortgageCondition,
    MortgageShare,
    Payment,
    RequestStatus,
    UserRole,
)

logger = logging.getLogger(__name__)

UNDEFINED_TABLE = "42P01"


@dataclass(frozen=True)
class ConnectionStatus:
    success: bool
    error: str | None = None


class Database:
    """Owns the async engine for one store connection."""

    def __init__(self, config: ConnectionConfig, echo: bool = False):
        self.config = config
        self.engine = create_async_engine(config.database_url, echo=echo)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def _to_mortgage(r: MortgageRecord) -> Mortgage:
    return Mortgage(
        id=r.id,
        user_id=r.user_id,
        display_name=r.display_name,
        total_amount=Decimal(r.total_amount),
        interest_rate=Decimal(r.interest_rate),
        start_date=r.start_date,
        term_months=r.term_months,
        monthly_payment=Decimal(r.monthly_payment or 0),
        notes=r.notes,
    )


def _to_condition(r: MortgageConditionRecord) -> MortgageCondition:
    return MortgageCondition(
        id=r.id,
        mortgage_id=r.mortgage_id,
        condition_type=ConditionType(r.condition_type),
        start_month=r.start_month,
        end_month=r.end_month,
        interest_rate=Decimal(r.interest_rate) if r.interest_rate is not None else None,
        description=r.description,
    )


def _to_bonification(r: MortgageBonificationRecord) -> MortgageBonification:
    return MortgageBonification(
        id=r.id,
        mortgage_id=r.mortgage_id,
        bonification_type=BonificationType(r.bonification_type),
        rate_reduction=Decimal(r.rate_reduction),
        description=r.description,
        is_active=r.is_active,
    )


def _to_share(r: MortgageShareRecord) -> MortgageShare:
    return MortgageShare(
        id=r.id,
        mortgage_id=r.mortgage_id,
        user_role=UserRole(r.user_role),
        initial_share_percentage=Decimal(r.initial_share_percentage),
        initial_share_amount=Decimal(r.initial_share_amount),
        amortized_amount=Decimal(r.amortized_amount or 0),
    )


def _optional_decimal(value) -> Decimal | None:
    return Decimal(value) if value is not None else None


def _to_payment(r: PaymentRecord) -> Payment:
    return Payment(
        id=r.id,
        mortgage_id=r.mortgage_id,
        payment_date=r.payment_date,
        amount=Decimal(r.amount),
        principal=_optional_decimal(r.principal),
        interest=_optional_decimal(r.interest),
        extra_payment=_optional_decimal(r.extra_payment),
        remaining_balance=_optional_decimal(r.remaining_balance),
        payment_number=r.payment_number,
        notes=r.notes,
    )


def _to_request(r: AmortizationRequestRecord) -> AmortizationRequest:
    return AmortizationRequest(
        id=r.id,
        mortgage_id=r.mortgage_id,
        share_id=r.share_id,
        amount=Decimal(r.amount),
        status=RequestStatus(r.status),
        requested_by=r.requested_by,
        reviewed_by=r.reviewed_by,
        reviewed_at=r.reviewed_at,
        created_at=r.created_at,
    )


class MortgageRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_connection(self) -> ConnectionStatus:
        """Probe the store by counting mortgages."""
        try:
            await self.session.execute(select(func.count()).select_from(MortgageRecord))
        except SQLAlchemyError as e:
            logger.warning("Store connection check failed: %s", e)
            pgcode = getattr(getattr(e, "orig", None), "pgcode", None)
            if pgcode == UNDEFINED_TABLE or "no such table" in str(e):
                return ConnectionStatus(False, 'Table "mortgages" not found. Please create the schema first.')
            return ConnectionStatus(False, str(e))
        return ConnectionStatus(True)

    # ---- Mortgages ----

    async def list_mortgages(self, user_id: str) -> list[Mortgage]:
        result = await self.session.execute(
            select(MortgageRecord)
            .where(MortgageRecord.user_id == user_id)
            .order_by(MortgageRecord.created_at.desc())
        )
        return [_to_mortgage(r) for r in result.scalars()]

    async def get_mortgage(self, mortgage_id: UUID) -> Mortgage | None:
        record = await self.session.get(MortgageRecord, mortgage_id)
        return _to_mortgage(record) if record is not None else None

    async def create_mortgage(self, user_id: str, mortgage: Mortgage) -> Mortgage:
        record = MortgageRecord(
            user_id=user_id,
            display_name=mortgage.display_name,
            total_amount=mortgage.total_amount,
            interest_rate=mortgage.interest_rate,
            start_date=mortgage.start_date,
            term_months=mortgage.term_months,
            monthly_payment=mortgage.monthly_payment,
            notes=mortgage.notes,
        )
        self.session.add(record)
        await self.session.commit()
        logger.debug("Created mortgage %s for %s", record.id, user_id)
        return _to_mortgage(record)

    # ---- Conditions ----

    async def list_conditions(self, mortgage_id: UUID) -> list[MortgageCondition]:
        result = await self.session.execute(
            select(MortgageConditionRecord)
            .where(MortgageConditionRecord.mortgage_id == mortgage_id)
            .order_by(MortgageConditionRecord.start_month)
        )
        return [_to_condition(r) for r in result.scalars()]

    async def get_condition(self, condition_id: UUID) -> MortgageCondition | None:
        record = await self.session.get(MortgageConditionRecord, condition_id)
        return _to_condition(record) if record is not None else None

    async def add_condition(self, mortgage_id: UUID, condition: MortgageCondition) -> MortgageCondition:
        record = MortgageConditionRecord(
            mortgage_id=mortgage_id,
            condition_type=ConditionType(condition.condition_type).value,
            start_month=condition.start_month,
            end_month=condition.end_month,
            interest_rate=condition.interest_rate,
            description=condition.description,
        )
        self.session.add(record)
        await self.session.commit()
        return _to_condition(record)

    async def delete_condition(self, condition_id: UUID) -> bool:
        record = await self.session.get(MortgageConditionRecord, condition_id)
        if record is None:
            return False
        await self.session.delete(record)
        await self.session.commit()
        return True

    # ---- Bonifications ----

    async def list_bonifications(self, mortgage_id: UUID) -> list[MortgageBonification]:
        result = await self.session.execute(
            select(MortgageBonificationRecord)
            .where(MortgageBonificationRecord.mortgage_id == mortgage_id)
            .order_by(MortgageBonificationRecord.created_at)
        )
        return [_to_bonification(r) for r in result.scalars()]

    async def get_bonification(self, bonification_id: UUID) -> MortgageBonification | None:
        record = await self.session.get(MortgageBonificationRecord, bonification_id)
        return _to_bonification(record) if record is not None else None

    async def add_bonification(
        self, mortgage_id: UUID, bonification: MortgageBonification
    ) -> MortgageBonification:
        record = MortgageBonificationRecord(
            mortgage_id=mortgage_id,
            bonification_type=BonificationType(bonification.bonification_type).value,
            rate_reduction=bonification.rate_reduction,
            description=bonification.description,
            is_active=bonification.is_active,
        )
        self.session.add(record)
        await self.session.commit()
        return _to_bonification(record)

    async def set_bonification_active(
        self, bonification_id: UUID, is_active: bool
    ) -> MortgageBonification | None:
        record = await self.session.get(MortgageBonificationRecord, bonification_id)
        if record is None:
            return None
        record.is_active = is_active
        await self.session.commit()
        return _to_bonification(record)

    # ---- Shares ----

    async def list_shares(self, mortgage_id: UUID) -> list[MortgageShare]:
        result = await self.session.execute(
            select(MortgageShareRecord).where(MortgageShareRecord.mortgage_id == mortgage_id)
        )
        return [_to_share(r) for r in result.scalars()]

    async def add_share(self, mortgage_id: UUID, share: MortgageShare) -> MortgageShare:
        record = MortgageShareRecord(
            mortgage_id=mortgage_id,
            user_role=UserRole(share.user_role).value,
            initial_share_percentage=share.initial_share_percentage,
            initial_share_amount=share.initial_share_amount,
            amortized_amount=share.amortized_amount,
        )
        self.session.add(record)
        await self.session.commit()
        return _to_share(record)

    # ---- Payments ----

    async def list_payments(self, mortgage_id: UUID) -> list[Payment]:
        result = await self.session.execute(
            select(PaymentRecord)
            .where(PaymentRecord.mortgage_id == mortgage_id)
            .order_by(PaymentRecord.payment_date)
        )
        return [_to_payment(r) for r in result.scalars()]

    async def add_payment(self, mortgage_id: UUID, payment: Payment) -> Payment:
        record = PaymentRecord(
            mortgage_id=mortgage_id,
            payment_date=payment.payment_date,
            amount=payment.amount,
            principal=payment.principal,
            interest=payment.interest,
            extra_payment=payment.extra_payment,
            remaining_balance=payment.remaining_balance,
            payment_number=payment.payment_number,
            notes=payment.notes,
        )
        self.session.add(record)
        await self.session.commit()
        return _to_payment(record)

    # ---- Bundle ----

    async def load_bundle(self, mortgage_id: UUID) -> MortgageBundle | None:
        mortgage = await self.get_mortgage(mortgage_id)
        if mortgage is None:
            return None
        return MortgageBundle(
            mortgage=mortgage,
            conditions=await self.list_conditions(mortgage_id),
            bonifications=await self.list_bonifications(mortgage_id),
            shares=await self.list_shares(mortgage_id),
            payments=await self.list_payments(mortgage_id),
        )

    # ---- Amortization requests ----

    async def list_requests(self, mortgage_id: UUID) -> list[AmortizationRequest]:
        result = await self.session.execute(
            select(AmortizationRequestRecord)
            .where(AmortizationRequestRecord.mortgage_id == mortgage_id)
            .order_by(AmortizationRequestRecord.created_at.desc())
        )
        return [_to_request(r) for r in result.scalars()]

    async def get_request(self, request_id: UUID) -> AmortizationRequest | None:
        record = await self.session.get(AmortizationRequestRecord, request_id)
        return _to_request(record) if record is not None else None

    async def create_request(
        self, mortgage_id: UUID, share_id: UUID, amount: Decimal, requested_by: str
    ) -> AmortizationRequest:
        record = AmortizationRequestRecord(
            mortgage_id=mortgage_id,
            share_id=share_id,
            amount=amount,
            status=RequestStatus.PENDING.value,
            requested_by=requested_by,
        )
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        logger.info("Amortization request %s of %s by %s", record.id, amount, requested_by)
        return _to_request(record)

    async def _pending_request(self, request_id: UUID) -> AmortizationRequestRecord | None:
        record = await self.session.get(AmortizationRequestRecord, request_id)
        if record is None:
            return None
        if record.status != RequestStatus.PENDING.value:
            raise ValueError(f"Request {request_id} is already {record.status}")
        return record

    async def approve_request(self, request_id: UUID, reviewer: str) -> AmortizationRequest | None:
        """Mark a pending request approved and credit its share's amortized amount."""
        record = await self._pending_request(request_id)
        if record is None:
            return None
        share = await self.session.get(MortgageShareRecord, record.share_id)
        if share is None:
            raise ValueError(f"Share {record.share_id} not found for request {request_id}")

        share.amortized_amount = Decimal(share.amortized_amount or 0) + Decimal(record.amount)
        record.status = RequestStatus.APPROVED.value
        record.reviewed_by = reviewer
        record.reviewed_at = datetime.now()
        await self.session.commit()
        logger.info("Approved amortization request %s by %s", request_id, reviewer)
        return _to_request(record)

    async def reject_request(self, request_id: UUID, reviewer: str) -> AmortizationRequest | None:
        record = await self._pending_request(request_id)
        if record is None:
            return None
        record.status = RequestStatus.REJECTED.value
        record.reviewed_by = reviewer
        record.reviewed_at = datetime.now()
        await self.session.commit()
        logger.info("Rejected amortization request %s by %s", request_id, reviewer)
        return _to_request(record)
