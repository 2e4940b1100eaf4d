"""
E-commerce Application Services

Orchestration services. Each one is bound to the unit of work it is built
with, so a unit of work must be started before services are created.
"""

from .base import abort, rollback_on_error, rollback_quietly
from .cart_service import CartService
from .discount_service import DiscountService
from .order_service import OrderService
from .payment_service import PaymentService
from .product_service import ProductService
from .shipping_service import DELIVERY_DAYS_BY_STATE, ShippingService, normalize_zip_code

__all__ = [
    "abort",
    "rollback_on_error",
    "rollback_quietly",
    "CartService",
    "DiscountService",
    "OrderService",
    "PaymentService",
    "ProductService",
    "ShippingService",
    "DELIVERY_DAYS_BY_STATE",
    "normalize_zip_code",
]
