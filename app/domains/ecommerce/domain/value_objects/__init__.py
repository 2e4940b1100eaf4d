"""
E-commerce Domain Value Objects

Immutable value objects for the e-commerce domain.
"""

from app.domains.ecommerce.domain.value_objects.discount_type import DiscountType
from app.domains.ecommerce.domain.value_objects.order_status import (
    OrderStatus,
    PaymentStatus,
    ProductStatus,
)
from app.domains.ecommerce.domain.value_objects.payment import (
    CreditCardMethodDetails,
    GatewayResponse,
    PaymentMethod,
    PaymentMethodDetails,
    PaymentStatusChange,
    PayPalMethodDetails,
    card_brand,
)

__all__ = [
    "OrderStatus",
    "PaymentStatus",
    "ProductStatus",
    "DiscountType",
    "PaymentMethod",
    "PaymentMethodDetails",
    "CreditCardMethodDetails",
    "PayPalMethodDetails",
    "PaymentStatusChange",
    "GatewayResponse",
    "card_brand",
]
