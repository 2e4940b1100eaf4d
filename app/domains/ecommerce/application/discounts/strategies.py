"""
Discount Strategies

Compute how much a set of discounts takes off a cart for a customer.
One strategy per discount type, resolved through DiscountStrategyFactory.
The checks and the accumulation are shared; each type only says how much
one discount takes off.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

from app.core.domain import Money, Ok, Result, fail, utc_now
from app.domains.ecommerce.application.ports import IDiscountRepository
from app.domains.ecommerce.domain.entities import Discount
from app.domains.ecommerce.domain.errors import DiscountErrors
from app.domains.ecommerce.domain.value_objects import DiscountType

logger = logging.getLogger(__name__)


class DiscountStrategy(ABC):
    """
    Shared checks and accumulation for every discount type.

    Rules, in order:
    - a customer who received more than `max_recent` discounts within the
      window gets none
    - each discount must exist, be of this strategy's type, reach its
      minimum order amount and be valid for use by the customer
    - amounts accumulate, each one capped by what is left of the cart
    """

    discount_type: DiscountType

    def __init__(
        self,
        repository: IDiscountRepository,
        max_recent: int = 8,
        window_days: int = 7,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repository = repository
        self._max_recent = max_recent
        self._window_days = window_days
        self._clock = clock

    async def calculate_total_discount(
        self,
        cart_amount: Money,
        discount_ids: Iterable[UUID],
        user_id: str,
    ) -> Result[Money]:
        discount_ids = list(dict.fromkeys(discount_ids))
        total = Money.zero(cart_amount.currency_code)
        if not discount_ids:
            return Ok(total)

        now = self._clock()
        recent = await self._repository.count_recent_by_customer(user_id, now - timedelta(days=self._window_days))
        if recent > self._max_recent:
            logger.info(f"Customer {user_id} received {recent} discounts in {self._window_days} days")
            return fail(DiscountErrors.too_many_discounts(self._max_recent, self._window_days))

        for discount_id in discount_ids:
            discount = await self._repository.get_by_id(discount_id)
            if discount is None:
                return fail(DiscountErrors.discount_not_found(discount_id))

            if discount.discount_type != self.discount_type:
                return fail(DiscountErrors.discount_not_valid(discount.id))

            if discount.min_order_amount > cart_amount.amount:
                return fail(DiscountErrors.min_order_not_reached(discount.min_order_amount))

            usages = await self._repository.count_customer_usages(user_id, discount.id)
            if not discount.is_valid_for_use(cart_amount.amount, usages, now):
                return fail(DiscountErrors.discount_not_valid(discount.id))

            remaining = cart_amount - total
            total = total + self.amount_off(discount, cart_amount).min(remaining)

        return Ok(total)

    @abstractmethod
    def amount_off(self, discount: Discount, cart_amount: Money) -> Money:
        """What one discount of this type takes off `cart_amount`, before capping."""


class FixedAmountDiscountStrategy(DiscountStrategy):
    discount_type = DiscountType.FIXED

    def amount_off(self, discount: Discount, cart_amount: Money) -> Money:
        return Money(cart_amount.currency_code, discount.fixed_amount or Decimal("0"))


class PercentageDiscountStrategy(DiscountStrategy):
    discount_type = DiscountType.PERCENTAGE

    def amount_off(self, discount: Discount, cart_amount: Money) -> Money:
        return cart_amount.percentage(discount.percentage or Decimal("0"))


class CouponDiscountStrategy(DiscountStrategy):
    """Coupons carry either a fixed amount or a percentage; the fixed amount wins."""

    discount_type = DiscountType.COUPON

    def amount_off(self, discount: Discount, cart_amount: Money) -> Money:
        if discount.fixed_amount is not None:
            return Money(cart_amount.currency_code, discount.fixed_amount)
        return cart_amount.percentage(discount.percentage or Decimal("0"))
