"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository. The header and the items
are written in two steps so the order id exists before stock is reserved.
"""

import logging
from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select

from app.core.domain import Address, EntityNotFoundException, Money
from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.entities import Order, OrderItem
from app.domains.ecommerce.domain.value_objects import OrderStatus
from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import OrderItemModel, OrderModel

from .base import SQLAlchemyRepository, rehydrate

logger = logging.getLogger(__name__)


def _address_to_json(address: Address | None) -> dict | None:
    return asdict(address) if address is not None else None


def _address_from_json(data: dict | None) -> Address | None:
    return Address(**data) if data else None


class SQLAlchemyOrderRepository(SQLAlchemyRepository, IOrderRepository):
    """
    SQLAlchemy implementation of order repository.

    Handles all order data persistence operations.
    """

    async def create_order(self, order: Order) -> UUID:
        """Insert the order header and return its id."""
        self.session.add(
            OrderModel(
                id=order.id,
                user_id=order.user_id,
                order_date=order.order_date,
                status=order.status.value,
                currency_code=order.currency_code,
                shipping_address=_address_to_json(order.shipping_address),
                billing_address=_address_to_json(order.billing_address),
                discount_amount=order.discount_amount.amount if order.discount_amount else None,
                completed_at=order.completed_at,
                created_at=order.created_at,
                updated_at=order.updated_at,
            )
        )
        await self.session.flush()
        return order.id

    async def create_order_items(self, order: Order) -> None:
        self.session.add_all(
            OrderItemModel(
                id=item.id,
                order_id=order.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price.amount,
                currency_code=item.unit_price.currency_code,
                position=position,
            )
            for position, item in enumerate(order.items)
        )
        await self.session.flush()

    async def get_by_id(self, order_id: UUID) -> Order | None:
        model = await self.session.get(OrderModel, order_id)
        if model is None:
            return None
        return await self._to_entity(model)

    async def get_by_user(self, user_id: str) -> list[Order]:
        """Orders of a user, newest first."""
        models = await self.session.scalars(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.order_date.desc(), OrderModel.created_at.desc())
        )
        return [await self._to_entity(m) for m in models.all()]

    async def filter(
        self,
        user_id: str | None = None,
        status: OrderStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Order], int]:
        statement = select(OrderModel)
        if user_id:
            statement = statement.where(OrderModel.user_id == user_id)
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        if start_date is not None:
            statement = statement.where(OrderModel.order_date >= start_date)
        if end_date is not None:
            statement = statement.where(OrderModel.order_date <= end_date)
        statement = statement.order_by(OrderModel.order_date.desc(), OrderModel.id)

        models, total = await self._paginate(statement, page, page_size)
        return [await self._to_entity(m) for m in models], total

    async def count(self) -> int:
        return int(await self.session.scalar(select(func.count()).select_from(OrderModel)) or 0)

    async def update(self, order: Order) -> None:
        model = await self.session.get(OrderModel, order.id)
        if model is None:
            raise EntityNotFoundException("Order", order.id)

        model.status = order.status.value
        model.discount_amount = order.discount_amount.amount if order.discount_amount else None
        model.completed_at = order.completed_at
        model.shipping_address = _address_to_json(order.shipping_address)
        model.billing_address = _address_to_json(order.billing_address)
        model.updated_at = order.updated_at
        await self.session.flush()

    async def delete(self, order_id: UUID) -> bool:
        model = await self.session.get(OrderModel, order_id)
        if model is None:
            return False
        await self.session.execute(delete(OrderItemModel).where(OrderItemModel.order_id == order_id))
        await self.session.delete(model)
        await self.session.flush()
        logger.info(f"Order {order_id} deleted")
        return True

    async def _to_entity(self, model: OrderModel) -> Order:
        items = await self.session.scalars(
            select(OrderItemModel)
            .where(OrderItemModel.order_id == model.id)
            .order_by(OrderItemModel.position, OrderItemModel.id)
        )
        result = Order.from_(
            order_id=model.id,
            user_id=model.user_id,
            order_date=model.order_date,
            status=OrderStatus(model.status),
            shipping_address=_address_from_json(model.shipping_address),
            billing_address=_address_from_json(model.billing_address),
            items=[
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=Money(item.currency_code, item.unit_price),
                    id=item.id,
                )
                for item in items.all()
            ],
            created_at=model.created_at,
            completed_at=model.completed_at,
            currency_code=model.currency_code,
            discount_amount=(
                Money(model.currency_code, model.discount_amount) if model.discount_amount is not None else None
            ),
        )
        return rehydrate(result, "order", model.id)
