"""
Order Service

Order creation from a cart and the order lifecycle.

`create_order` is the inner step of checkout: it reserves stock, applies
the cart's discounts and clears the cart inside the caller's unit of work.
Its commit is a no-op when a transaction handler controls the unit of
work, so the whole checkout commits or rolls back as one.
"""

import logging
from uuid import UUID

from app.core.domain import Err, Ok, Result, fail
from app.core.interfaces import IUnitOfWork
from app.domains.ecommerce.application.discounts import DiscountStrategyFactory
from app.domains.ecommerce.application.dto import CreateOrderRequest, OrderFilter, PageResult
from app.domains.ecommerce.application.ports import ICartRepository, IOrderRepository, IProductRepository
from app.domains.ecommerce.domain.entities import DiscountHistory, Order
from app.domains.ecommerce.domain.errors import CartErrors, OrderErrors, ProductErrors
from app.domains.ecommerce.domain.value_objects import OrderStatus

from .base import abort, rollback_on_error
from .discount_service import DiscountService

logger = logging.getLogger(__name__)

# Status changes an operator may request through update_status
_ALLOWED_STATUS_UPDATES: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.CONFIRMED: frozenset({OrderStatus.CANCELLED, OrderStatus.REFUNDED, OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
}


class OrderService:
    """Order use cases over one unit of work."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        discount_service: DiscountService,
        discount_strategies: DiscountStrategyFactory,
    ):
        self._unit_of_work = unit_of_work
        self._orders = unit_of_work.get_repository(IOrderRepository)
        self._carts = unit_of_work.get_repository(ICartRepository)
        self._products = unit_of_work.get_repository(IProductRepository)
        self._discount_service = discount_service
        self._discount_strategies = discount_strategies

    # ==================== Queries ====================

    async def get_orders(self, page: int = 1, page_size: int = 20) -> Result[PageResult[Order]]:
        return await self.get_filtered(OrderFilter(page=page, page_size=page_size))

    async def get_filtered(self, filters: OrderFilter) -> Result[PageResult[Order]]:
        orders, total = await self._orders.filter(
            user_id=filters.user_id,
            status=filters.status,
            start_date=filters.start_date,
            end_date=filters.end_date,
            page=filters.page,
            page_size=filters.page_size,
        )
        return Ok(PageResult(orders, total, filters.page, filters.page_size))

    async def get_by_id(self, order_id: UUID) -> Result[Order]:
        order = await self._orders.get_by_id(order_id)
        if order is None:
            return fail(OrderErrors.order_not_found(order_id))
        return Ok(order)

    async def get_by_user(self, user_id: str) -> Result[list[Order]]:
        return Ok(await self._orders.get_by_user(user_id))

    # ==================== Commands ====================

    async def create_order(self, request: CreateOrderRequest) -> Result[UUID]:
        """
        Turn the user's cart into an order and return the new order id.

        Every item must exist and have enough stock, otherwise nothing is
        kept: the order header, stock changes and discount usage are rolled
        back together.
        """
        async with rollback_on_error(self._unit_of_work, "create_order"):
            cart = await self._carts.get_by_user(request.user_id)
            if cart is None:
                return fail(CartErrors.cart_not_found(request.user_id))
            if cart.is_empty:
                return fail(CartErrors.cart_empty(request.user_id))

            created = Order.create(
                request.user_id,
                request.shipping_address,
                request.billing_address,
                cart.currency_code,
            )
            if isinstance(created, Err):
                return created
            order = created.value

            order_id = await self._orders.create_order(order)

            for item in cart.items:
                product = await self._products.get_by_id(item.product_id)
                if product is None:
                    return await abort(self._unit_of_work, fail(ProductErrors.product_not_found(item.product_id)))
                if not product.has_stock(item.quantity):
                    return await abort(self._unit_of_work, fail(ProductErrors.product_out_of_stock(product.id)))

                added = order.add_item(product.id, item.quantity, item.unit_price)
                if isinstance(added, Err):
                    return await abort(self._unit_of_work, added)

                if not product.decrement_stock(item.quantity):
                    return await abort(self._unit_of_work, fail(ProductErrors.product_out_of_stock(product.id)))
                await self._products.update(product)

            histories: list[DiscountHistory] = []
            for discount in await self._discount_service.get_discounts_to_apply(cart, request.user_id):
                strategy = self._discount_strategies.get(discount.discount_type)
                amount = await strategy.calculate_total_discount(order.total_amount, [discount.id], request.user_id)
                if isinstance(amount, Err):
                    return await abort(self._unit_of_work, amount)

                applied = amount.value.min(order.total_with_discount)
                if not applied.is_positive():
                    continue

                order.apply_discount(applied)
                histories.append(DiscountHistory.record(order_id, request.user_id, discount, applied))
                registered = await self._discount_service.register_usage(discount)
                if isinstance(registered, Err):
                    return await abort(self._unit_of_work, registered)

            await self._orders.create_order_items(order)
            await self._orders.update(order)
            for history in histories:
                await self._discount_service.create_discount_history(history)

            cart.clear()
            await self._carts.update(cart)
            await self._discount_service.clear_applied_discounts(cart.id)

            await self._unit_of_work.commit()
            logger.info(
                f"Order {order_id} created for user {request.user_id}: "
                f"{len(order.items)} items, total {order.total_with_discount}"
            )
            return Ok(order_id)

    async def update_status(self, order_id: UUID, status: OrderStatus) -> Result[Order]:
        async with rollback_on_error(self._unit_of_work, "update_order_status"):
            order = await self._orders.get_by_id(order_id)
            if order is None:
                return fail(OrderErrors.order_not_found(order_id))
            if order.status == status:
                return Ok(order)

            if status not in _ALLOWED_STATUS_UPDATES.get(order.status, frozenset()):
                return fail(OrderErrors.status_transition(order.status.value, status.value))

            updated = order.update_status(status)
            if isinstance(updated, Err):
                return updated

            await self._orders.update(order)
            await self._unit_of_work.commit()
            logger.info(f"Order {order_id} moved to {status.value}")
            return Ok(order)

    async def mark_as_paid(self, order_id: UUID) -> Result[Order]:
        async with rollback_on_error(self._unit_of_work, "mark_order_as_paid"):
            order = await self._orders.get_by_id(order_id)
            if order is None:
                return fail(OrderErrors.order_not_found(order_id))

            processing = order.process_payment()
            if isinstance(processing, Err):
                return processing
            paid = order.confirm_payment()
            if isinstance(paid, Err):
                return paid

            await self._orders.update(order)
            await self._unit_of_work.commit()
            return Ok(order)

    async def delete_order(self, order_id: UUID) -> Result[None]:
        async with rollback_on_error(self._unit_of_work, "delete_order"):
            if not await self._orders.delete(order_id):
                return await abort(self._unit_of_work, fail(OrderErrors.order_not_found(order_id)))
            await self._unit_of_work.commit()
            return Ok(None)
