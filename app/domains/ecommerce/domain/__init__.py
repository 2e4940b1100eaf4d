"""
E-commerce Domain Layer

Domain-Driven Design implementation for the e-commerce bounded context.

This module contains:
- Entities: Business objects with identity (Cart, Product, Order, Discount, PaymentRecord)
- Value Objects: Immutable domain primitives (statuses, payment method details)
- Errors: Business error factories returned inside Err results
- Domain Services: Order reference generation and payment input validation
"""

from app.domains.ecommerce.domain.entities import (
    Cart,
    CartItem,
    Category,
    Discount,
    DiscountHistory,
    Order,
    OrderItem,
    PaymentRecord,
    Product,
)
from app.domains.ecommerce.domain.errors import (
    CartErrors,
    CommonErrors,
    DiscountErrors,
    OrderErrors,
    PaymentErrors,
    ProductErrors,
    ShippingErrors,
)
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.domain.value_objects import (
    CreditCardMethodDetails,
    DiscountType,
    GatewayResponse,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentStatusChange,
    PayPalMethodDetails,
    ProductStatus,
)

__all__ = [
    # Entities
    "Cart",
    "CartItem",
    "Product",
    "Category",
    "Order",
    "OrderItem",
    "Discount",
    "DiscountHistory",
    "PaymentRecord",
    # Value Objects
    "OrderStatus",
    "PaymentStatus",
    "ProductStatus",
    "DiscountType",
    "PaymentMethod",
    "CreditCardMethodDetails",
    "PayPalMethodDetails",
    "PaymentStatusChange",
    "GatewayResponse",
    # Errors
    "CommonErrors",
    "CartErrors",
    "OrderErrors",
    "ProductErrors",
    "DiscountErrors",
    "PaymentErrors",
    "ShippingErrors",
    # Services
    "OrderIdGenerator",
]
