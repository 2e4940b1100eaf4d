"""
Discount Strategy Factory
"""

from collections.abc import Callable
from datetime import datetime

from app.core.domain import ConfigurationException, utc_now
from app.domains.ecommerce.application.ports import IDiscountRepository
from app.domains.ecommerce.domain.value_objects import DiscountType

from .strategies import (
    CouponDiscountStrategy,
    DiscountStrategy,
    FixedAmountDiscountStrategy,
    PercentageDiscountStrategy,
)

_STRATEGIES: dict[DiscountType, type[DiscountStrategy]] = {
    DiscountType.FIXED: FixedAmountDiscountStrategy,
    DiscountType.PERCENTAGE: PercentageDiscountStrategy,
    DiscountType.COUPON: CouponDiscountStrategy,
}


class DiscountStrategyFactory:
    """Builds the strategy for a discount type over one discount repository."""

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

    def get(self, discount_type: DiscountType) -> DiscountStrategy:
        strategy_class = _STRATEGIES.get(discount_type)
        if strategy_class is None:
            raise ConfigurationException("DiscountStrategyFactory", f"No strategy for discount type {discount_type!r}")
        return strategy_class(self._repository, self._max_recent, self._window_days, self._clock)
