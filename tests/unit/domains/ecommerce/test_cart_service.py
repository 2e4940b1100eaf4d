"""
Unit Tests for CartService
"""

import pytest

from app.core.domain import Money
from app.domains.ecommerce.application.services import CartService
from app.domains.ecommerce.domain.value_objects import ProductStatus
from tests.utils import CartBuilder, DiscountBuilder, ProductBuilder, assert_err


@pytest.fixture
def service(uow, discount_strategies):
    return CartService(uow, discount_strategies)


@pytest.fixture
def product(repositories):
    product = ProductBuilder().with_price("50.00").with_stock(3).build()
    repositories.products.get_by_id.side_effect = lambda product_id: product if product_id == product.id else None
    return product


class TestGetCart:
    @pytest.mark.asyncio
    async def test_first_access_creates_empty_cart(self, service, uow, repositories):
        result = await service.get_cart("user-1")

        cart = result.value
        assert cart.is_empty
        assert cart.currency_code == "BRL"
        repositories.carts.create.assert_awaited_once_with(cart)
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_cart_is_returned(self, service, uow, repositories):
        cart = CartBuilder().build()
        repositories.carts.get_by_user.return_value = cart

        assert (await service.get_cart("user-1")).value is cart
        repositories.carts.create.assert_not_awaited()


class TestCartItems:
    @pytest.mark.asyncio
    async def test_add_item_uses_catalog_price(self, service, repositories, product):
        cart = CartBuilder().build()
        repositories.carts.get_by_user.return_value = cart

        result = await service.add_item("user-1", product.id, 2)

        assert result.value.total_amount == Money.of("BRL", "100.00")
        repositories.carts.update.assert_awaited_once_with(cart)

    @pytest.mark.asyncio
    async def test_stock_counts_quantity_already_in_cart(self, service, uow, repositories, product):
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product, 2).build()

        result = await service.add_item("user-1", product.id, 2)

        assert_err(result, "ERR_PRODUCT_OUT_OF_STOCK")
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unavailable_product(self, service, repositories, product):
        repositories.carts.get_by_user.return_value = CartBuilder().build()
        product.status = ProductStatus.INACTIVE

        assert_err(await service.add_item("user-1", product.id, 1), "ERR_PRODUCT_OUT_OF_STOCK")

    @pytest.mark.asyncio
    async def test_unknown_product(self, service, repositories):
        repositories.carts.get_by_user.return_value = CartBuilder().build()

        assert_err(await service.add_item("user-1", ProductBuilder().build().id, 1), "ERR_PRODUCT_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_update_quantity_checks_stock(self, service, repositories, product):
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product, 1).build()

        assert_err(await service.update_item_quantity("user-1", product.id, 4), "ERR_PRODUCT_OUT_OF_STOCK")
        assert (await service.update_item_quantity("user-1", product.id, 3)).value.items_count == 3

    @pytest.mark.asyncio
    async def test_removing_last_item_drops_discount(self, service, repositories, product):
        cart = CartBuilder().with_item(product, 1).build()
        cart.apply_discount(Money.of("BRL", "5.00"))
        repositories.carts.get_by_user.return_value = cart

        result = await service.remove_item("user-1", product.id)

        assert result.value.discount_amount is None
        repositories.discounts.clear_applied_discounts.assert_awaited_once_with(cart.id)

    @pytest.mark.asyncio
    async def test_clear_without_cart(self, service):
        assert_err(await service.clear_cart("user-1"), "ERR_CART_NOT_FOUND")


class TestApplyCoupon:
    @pytest.mark.asyncio
    async def test_coupon_discount_is_applied(self, service, uow, repositories, product):
        # Arrange
        cart = CartBuilder().with_item(product, 2).build()
        coupon = DiscountBuilder().coupon("BEMVINDO", percentage="10").build()
        repositories.carts.get_by_user.return_value = cart
        repositories.discounts.get_by_code.return_value = coupon
        repositories.discounts.get_by_id.return_value = coupon
        repositories.discounts.get_discounts_to_apply.return_value = [coupon]

        # Act
        result = await service.apply_coupon("user-1", " bemvindo ")

        # Assert
        assert result.value.total_with_discount == Money.of("BRL", "90.00")
        repositories.discounts.get_by_code.assert_awaited_once_with("BEMVINDO")
        repositories.discounts.apply_to_cart.assert_awaited_once_with(cart.id, coupon.id)
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_coupon(self, service, repositories, product):
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product).build()

        assert_err(await service.apply_coupon("user-1", "NOPE"), "ERR_DISCOUNT_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_empty_cart(self, service, repositories):
        repositories.carts.get_by_user.return_value = CartBuilder().build()

        assert_err(await service.apply_coupon("user-1", "BEMVINDO"), "ERR_CART_EMPTY")

    @pytest.mark.asyncio
    async def test_minimum_order_not_reached(self, service, repositories, product):
        repositories.carts.get_by_user.return_value = CartBuilder().with_item(product).build()
        repositories.discounts.get_by_code.return_value = DiscountBuilder().coupon("VIP", amount="20").with_min_order("200").build()

        assert_err(await service.apply_coupon("user-1", "VIP"), "ERR_MIN_ORDER_AMOUNT")
        repositories.discounts.apply_to_cart.assert_not_awaited()
