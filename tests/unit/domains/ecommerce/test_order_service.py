"""
Unit Tests for OrderService
"""

import pytest

from app.core.domain import Money
from app.domains.ecommerce.application.dto import CreateOrderRequest
from app.domains.ecommerce.application.services import DiscountService, OrderService
from app.domains.ecommerce.domain.value_objects import OrderStatus
from tests.utils import (
    CartBuilder,
    DiscountBuilder,
    OrderBuilder,
    ProductBuilder,
    assert_err,
    make_address,
)


@pytest.fixture
def service(uow, discount_strategies):
    return OrderService(uow, DiscountService(uow), discount_strategies)


def _request(user_id: str = "user-1") -> CreateOrderRequest:
    return CreateOrderRequest(user_id, make_address(), make_address())


def _serve_products(repositories, *products):
    by_id = {p.id: p for p in products}
    repositories.products.get_by_id.side_effect = lambda product_id: by_id.get(product_id)


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_creates_order_from_cart(self, service, uow, repositories, stored_orders):
        # Arrange
        product = ProductBuilder().with_price("50.00").with_stock(5).build()
        cart = CartBuilder().with_item(product, 2).build()
        repositories.carts.get_by_user.return_value = cart
        _serve_products(repositories, product)

        # Act
        result = await service.create_order(_request())

        # Assert
        order = stored_orders[result.value]
        assert order.total_amount == Money.of("BRL", "100.00")
        assert order.status == OrderStatus.CREATED
        assert product.stock == 3
        assert cart.is_empty
        repositories.orders.create_order_items.assert_awaited_once_with(order)
        repositories.discounts.clear_applied_discounts.assert_awaited_once_with(cart.id)
        uow.commit.assert_awaited()
        uow.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_or_empty_cart(self, service, repositories):
        assert_err(await service.create_order(_request()), "ERR_CART_NOT_FOUND")

        repositories.carts.get_by_user.return_value = CartBuilder().build()
        assert_err(await service.create_order(_request()), "ERR_CART_EMPTY")
        repositories.orders.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_product_rolls_back(self, service, uow, repositories, stored_orders):
        # Arrange
        first = ProductBuilder().build()
        missing = ProductBuilder().build()
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(first).with_item(missing).build()
        _serve_products(repositories, first)

        # Act
        result = await service.create_order(_request())

        # Assert
        assert_err(result, "ERR_PRODUCT_NOT_FOUND")
        uow.rollback.assert_awaited_once()
        uow.commit.assert_not_awaited()
        repositories.orders.create_order_items.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, service, uow, repositories, stored_orders):
        product = ProductBuilder().with_stock(1).build()
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product, 2).build()
        _serve_products(repositories, product)

        result = await service.create_order(_request())

        assert_err(result, "ERR_PRODUCT_OUT_OF_STOCK")
        assert product.stock == 1
        uow.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_applies_cart_discounts_and_records_history(self, service, repositories, stored_orders):
        # Arrange
        product = ProductBuilder().with_price("50.00").build()
        cart = CartBuilder().with_item(product, 2).build()
        discount = DiscountBuilder().fixed("30.00").with_uses(0, 1).build()
        repositories.carts.get_by_user.return_value = cart
        repositories.discounts.get_discounts_to_apply.return_value = [discount]
        repositories.discounts.get_by_id.return_value = discount
        _serve_products(repositories, product)

        # Act
        order = stored_orders[(await service.create_order(_request())).value]

        # Assert
        assert order.discount_amount == Money.of("BRL", "30.00")
        assert order.total_with_discount == Money.of("BRL", "70.00")
        assert discount.uses == 1
        assert not discount.is_active
        history = repositories.discounts.create_history.await_args.args[0]
        assert history.order_id == order.id
        assert history.discount_amount == Money.of("BRL", "30.00")

    @pytest.mark.asyncio
    async def test_exception_rolls_back_and_propagates(self, service, uow, repositories, stored_orders):
        product = ProductBuilder().build()
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product).build()
        repositories.products.get_by_id.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await service.create_order(_request())

        uow.rollback.assert_awaited_once()


class TestOrderStatus:
    @pytest.mark.asyncio
    async def test_operator_can_ship_confirmed_order(self, service, uow, stored_orders):
        order = OrderBuilder().with_status(OrderStatus.CONFIRMED).build()
        stored_orders[order.id] = order

        result = await service.update_status(order.id, OrderStatus.SHIPPED)

        assert result.value.status == OrderStatus.SHIPPED
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_operator_cannot_confirm_unpaid_order(self, service, stored_orders):
        order = OrderBuilder().build()
        stored_orders[order.id] = order

        result = await service.update_status(order.id, OrderStatus.CONFIRMED)

        assert_err(result, "ERR_STATUS_TRANSITION")
        assert order.status == OrderStatus.CREATED

    @pytest.mark.asyncio
    async def test_mark_as_paid(self, service, stored_orders):
        order = OrderBuilder().build()
        stored_orders[order.id] = order

        result = await service.mark_as_paid(order.id)

        assert result.value.status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_delete_unknown_order(self, service, uow, repositories):
        repositories.orders.delete.return_value = False

        assert_err(await service.delete_order(OrderBuilder().build().id), "ERR_ORDER_NOT_FOUND")
        uow.rollback.assert_awaited_once()
