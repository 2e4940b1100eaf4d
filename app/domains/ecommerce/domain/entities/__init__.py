"""
E-commerce Domain Entities

Business entities with identity and lifecycle for the e-commerce domain.
"""

from app.domains.ecommerce.domain.entities.cart import Cart, CartItem
from app.domains.ecommerce.domain.entities.discount import (
    Discount,
    DiscountHistory,
    validate_discount,
)
from app.domains.ecommerce.domain.entities.order import Order, OrderItem
from app.domains.ecommerce.domain.entities.payment import PaymentRecord
from app.domains.ecommerce.domain.entities.product import Category, Product

__all__ = [
    "Cart",
    "CartItem",
    "Product",
    "Category",
    "Order",
    "OrderItem",
    "Discount",
    "DiscountHistory",
    "validate_discount",
    "PaymentRecord",
]
