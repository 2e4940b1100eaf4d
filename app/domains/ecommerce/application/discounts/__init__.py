"""
Discount calculation strategies.
"""

from app.domains.ecommerce.application.discounts.factory import DiscountStrategyFactory
from app.domains.ecommerce.application.discounts.strategies import (
    CouponDiscountStrategy,
    DiscountStrategy,
    FixedAmountDiscountStrategy,
    PercentageDiscountStrategy,
)

__all__ = [
    "DiscountStrategy",
    "FixedAmountDiscountStrategy",
    "PercentageDiscountStrategy",
    "CouponDiscountStrategy",
    "DiscountStrategyFactory",
]
