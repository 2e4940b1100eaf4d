"""
Unit Tests for the discount strategies
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from app.core.domain import ConfigurationException, Money, utc_now
from app.domains.ecommerce.application.discounts import (
    DiscountStrategyFactory,
    PercentageDiscountStrategy,
)
from app.domains.ecommerce.domain.value_objects import DiscountType
from tests.utils import DiscountBuilder, assert_err, create_mock_repositories


@pytest.fixture
def repository():
    return create_mock_repositories().discounts


@pytest.fixture
def factory(repository):
    return DiscountStrategyFactory(repository, max_recent=2, window_days=7)


def _serve(repository, *discounts):
    by_id = {d.id: d for d in discounts}
    repository.get_by_id.side_effect = lambda discount_id: by_id.get(discount_id)


class TestDiscountStrategy:
    @pytest.mark.asyncio
    async def test_no_discounts_is_zero(self, factory, repository):
        strategy = factory.get(DiscountType.FIXED)

        result = await strategy.calculate_total_discount(Money.of("BRL", "100"), [], "user-1")

        assert result.value == Money.zero("BRL")
        repository.count_recent_by_customer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_discounts_accumulate_capped_by_remaining(self, factory, repository):
        # Arrange
        fixed = DiscountBuilder().fixed("30").build()
        half = DiscountBuilder().fixed("50").build()
        big = DiscountBuilder().fixed("60").build()
        _serve(repository, fixed, half, big)

        # Act
        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [fixed.id, half.id, big.id], "user-1"
        )

        # Assert: 30 + 50 + min(60, 20)
        assert result.value == Money.of("BRL", "100")

    @pytest.mark.asyncio
    async def test_duplicated_ids_count_once(self, factory, repository):
        fixed = DiscountBuilder().fixed("10").build()
        _serve(repository, fixed)

        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [fixed.id, fixed.id], "user-1"
        )

        assert result.value == Money.of("BRL", "10")

    @pytest.mark.asyncio
    async def test_too_many_recent_discounts(self, factory, repository):
        repository.count_recent_by_customer.return_value = 3

        result = await factory.get(DiscountType.COUPON).calculate_total_discount(
            Money.of("BRL", "100"), [uuid4()], "user-1"
        )

        assert_err(result, "ERR_TOO_MANY_DISCOUNTS")
        since = repository.count_recent_by_customer.await_args.args[1]
        assert utc_now() - since >= timedelta(days=7)

    @pytest.mark.asyncio
    async def test_unknown_discount(self, factory):
        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [uuid4()], "user-1"
        )

        assert_err(result, "ERR_DISCOUNT_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_minimum_order_amount(self, factory, repository):
        discount = DiscountBuilder().with_min_order("150").build()
        _serve(repository, discount)

        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [discount.id], "user-1"
        )

        assert_err(result, "ERR_MIN_ORDER_AMOUNT")

    @pytest.mark.asyncio
    async def test_customer_usage_limit(self, factory, repository):
        discount = DiscountBuilder().with_max_uses_per_user(1).build()
        _serve(repository, discount)
        repository.count_customer_usages.return_value = 1

        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [discount.id], "user-1"
        )

        assert_err(result, "ERR_DISCOUNT_INVALID")
        repository.count_customer_usages.assert_awaited_once_with("user-1", discount.id)

    @pytest.mark.asyncio
    async def test_discount_of_another_type_is_rejected(self, factory, repository):
        percent = DiscountBuilder().percentage("10").build()
        _serve(repository, percent)

        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "100"), [percent.id], "user-1"
        )

        assert_err(result, "ERR_DISCOUNT_INVALID")


class TestAmountPerType:
    @pytest.mark.asyncio
    async def test_fixed_is_capped_by_cart(self, factory, repository):
        discount = DiscountBuilder().fixed("30.00").build()
        _serve(repository, discount)

        result = await factory.get(DiscountType.FIXED).calculate_total_discount(
            Money.of("BRL", "20.00"), [discount.id], "user-1"
        )

        assert result.value == Money.of("BRL", "20.00")

    @pytest.mark.asyncio
    async def test_percentage_is_rounded_to_cents(self, factory, repository):
        discount = DiscountBuilder().percentage("15").build()
        _serve(repository, discount)

        result = await factory.get(DiscountType.PERCENTAGE).calculate_total_discount(
            Money.of("BRL", "99.90"), [discount.id], "user-1"
        )

        assert result.value == Money.of("BRL", "14.99")

    @pytest.mark.parametrize(
        "amount, percentage, expected",
        [("5", None, "5"), (None, "10", "8"), ("5", "10", "5")],
    )
    def test_coupon_prefers_fixed_amount(self, factory, amount, percentage, expected):
        coupon = DiscountBuilder().coupon("SAVE", amount=amount, percentage=percentage).build()

        off = factory.get(DiscountType.COUPON).amount_off(coupon, Money.of("BRL", "80"))

        assert off == Money.of("BRL", expected)


class TestDiscountStrategyFactory:
    def test_resolves_strategy_per_type(self, factory):
        strategy = factory.get(DiscountType.PERCENTAGE)

        assert isinstance(strategy, PercentageDiscountStrategy)
        assert strategy.discount_type == DiscountType.PERCENTAGE

    def test_unknown_type(self, factory):
        with pytest.raises(ConfigurationException):
            factory.get("loyalty")
