"""
Discount Type Value Object
"""

from app.core.domain import StatusEnum


class DiscountType(StatusEnum):
    """
    How a discount amount is computed.

    - FIXED: flat amount, capped at the order amount
    - PERCENTAGE: share of the order amount (0-100)
    - COUPON: code-based, fixed amount when present, else percentage
    """

    FIXED = "fixed"
    PERCENTAGE = "percentage"
    COUPON = "coupon"
