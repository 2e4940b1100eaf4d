"""
Payment Repository Implementation

SQLAlchemy implementation of IPaymentRepository. Status history rows are
append-only and written one by one through `create_status_history`.
"""

import logging
from uuid import UUID

from sqlalchemy import select

from app.core.domain import EntityNotFoundException, Money
from app.domains.ecommerce.application.ports import IPaymentRepository
from app.domains.ecommerce.domain.entities import PaymentRecord
from app.domains.ecommerce.domain.value_objects import (
    CreditCardMethodDetails,
    PaymentMethod,
    PaymentMethodDetails,
    PaymentStatus,
    PaymentStatusChange,
    PayPalMethodDetails,
)
from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import (
    OrderModel,
    PaymentRecordModel,
    PaymentStatusHistoryModel,
)

from .base import SQLAlchemyRepository, rehydrate

logger = logging.getLogger(__name__)


class SQLAlchemyPaymentRepository(SQLAlchemyRepository, IPaymentRepository):
    """SQLAlchemy implementation of payment repository."""

    async def create(self, payment: PaymentRecord) -> UUID:
        """Insert the payment row only; history is written separately."""
        model = PaymentRecordModel(
            id=payment.id,
            order_id=payment.order_id,
            amount=payment.amount.amount,
            currency_code=payment.amount.currency_code,
            payment_method=payment.payment_method.value,
            transaction_id=payment.transaction_id,
            processed_at=payment.processed_at,
            status=payment.status.value,
            gateway_response=payment.gateway_response,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )
        self._write_method_details(model, payment.method_details)
        self.session.add(model)
        await self.session.flush()
        return payment.id

    async def create_status_history(self, payment_id: UUID, change: PaymentStatusChange) -> None:
        self.session.add(
            PaymentStatusHistoryModel(
                id=change.id,
                payment_id=payment_id,
                status=change.status.value,
                reference=change.reference,
                occurred_at=change.occurred_at,
            )
        )
        await self.session.flush()

    async def update(self, payment: PaymentRecord) -> None:
        model = await self.session.get(PaymentRecordModel, payment.id)
        if model is None:
            raise EntityNotFoundException("PaymentRecord", payment.id)

        model.status = payment.status.value
        model.gateway_response = payment.gateway_response
        model.updated_at = payment.updated_at
        await self.session.flush()

    async def get_by_id(self, payment_id: UUID) -> PaymentRecord | None:
        model = await self.session.get(PaymentRecordModel, payment_id)
        return await self._to_entity(model) if model else None

    async def get_by_transaction_id(self, transaction_id: UUID) -> PaymentRecord | None:
        model = await self.session.scalar(
            select(PaymentRecordModel).where(PaymentRecordModel.transaction_id == transaction_id)
        )
        return await self._to_entity(model) if model else None

    async def get_by_order(self, order_id: UUID) -> list[PaymentRecord]:
        models = await self.session.scalars(
            select(PaymentRecordModel)
            .where(PaymentRecordModel.order_id == order_id)
            .order_by(PaymentRecordModel.processed_at)
        )
        return [await self._to_entity(m) for m in models.all()]

    async def get_by_customer(self, user_id: str) -> list[PaymentRecord]:
        models = await self.session.scalars(
            select(PaymentRecordModel)
            .join(OrderModel, OrderModel.id == PaymentRecordModel.order_id)
            .where(OrderModel.user_id == user_id)
            .order_by(PaymentRecordModel.processed_at.desc())
        )
        return [await self._to_entity(m) for m in models.all()]

    async def filter(
        self,
        status: PaymentStatus | None = None,
        payment_method: PaymentMethod | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[PaymentRecord], int]:
        statement = select(PaymentRecordModel)
        if status is not None:
            statement = statement.where(PaymentRecordModel.status == status.value)
        if payment_method is not None:
            statement = statement.where(PaymentRecordModel.payment_method == payment_method.value)
        statement = statement.order_by(PaymentRecordModel.processed_at.desc(), PaymentRecordModel.id)

        models, total = await self._paginate(statement, page, page_size)
        return [await self._to_entity(m) for m in models], total

    @staticmethod
    def _write_method_details(model: PaymentRecordModel, details: PaymentMethodDetails | None) -> None:
        if isinstance(details, CreditCardMethodDetails):
            model.last_four_digits = details.last_four_digits
            model.card_brand = details.card_brand
        elif isinstance(details, PayPalMethodDetails):
            model.payer_email = details.payer_email
            model.payer_id = details.payer_id

    @staticmethod
    def _read_method_details(model: PaymentRecordModel) -> PaymentMethodDetails | None:
        method = PaymentMethod(model.payment_method)
        if method == PaymentMethod.CREDIT_CARD and model.last_four_digits:
            return CreditCardMethodDetails(last_four_digits=model.last_four_digits, card_brand=model.card_brand or "")
        if method == PaymentMethod.PAYPAL and model.payer_email:
            return PayPalMethodDetails(payer_email=model.payer_email, payer_id=model.payer_id or "")
        return None

    async def _to_entity(self, model: PaymentRecordModel) -> PaymentRecord:
        history = await self.session.scalars(
            select(PaymentStatusHistoryModel)
            .where(PaymentStatusHistoryModel.payment_id == model.id)
            .order_by(PaymentStatusHistoryModel.occurred_at, PaymentStatusHistoryModel.id)
        )
        result = PaymentRecord.from_(
            payment_id=model.id,
            order_id=model.order_id,
            amount=Money(model.currency_code, model.amount),
            payment_method=PaymentMethod(model.payment_method),
            transaction_id=model.transaction_id,
            processed_at=model.processed_at,
            status=PaymentStatus(model.status),
            gateway_response=model.gateway_response,
            method_details=self._read_method_details(model),
            status_history=[
                PaymentStatusChange(
                    status=PaymentStatus(h.status),
                    reference=h.reference,
                    occurred_at=h.occurred_at,
                    id=h.id,
                )
                for h in history.all()
            ],
        )
        return rehydrate(result, "payment", model.id)
