"""
SQLAlchemy models for the e-commerce domain.

Importing this package registers every table on `Base.metadata`.
"""

from .models import (
    CartItemModel,
    CartModel,
    CategoryModel,
    DiscountHistoryModel,
    DiscountModel,
    OrderItemModel,
    OrderModel,
    PaymentRecordModel,
    PaymentStatusHistoryModel,
    ProductModel,
    discount_carts,
    discount_categories,
    product_categories,
)

__all__ = [
    "CartItemModel",
    "CartModel",
    "CategoryModel",
    "DiscountHistoryModel",
    "DiscountModel",
    "OrderItemModel",
    "OrderModel",
    "PaymentRecordModel",
    "PaymentStatusHistoryModel",
    "ProductModel",
    "discount_carts",
    "discount_categories",
    "product_categories",
]
