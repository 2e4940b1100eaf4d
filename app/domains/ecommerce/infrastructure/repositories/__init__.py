"""
E-commerce Infrastructure Repositories

SQLAlchemy implementations of the application ports. Each one is built by
the unit of work from its transaction context.
"""

from collections.abc import Callable, Mapping
from typing import Any

from app.core.interfaces import ITransactionContext
from app.domains.ecommerce.application.ports import (
    ICartRepository,
    IDiscountRepository,
    IOrderRepository,
    IPaymentRepository,
    IProductRepository,
)

from .base import SQLAlchemyRepository, rehydrate
from .cart_repository import SQLAlchemyCartRepository
from .discount_repository import SQLAlchemyDiscountRepository
from .order_repository import SQLAlchemyOrderRepository
from .payment_repository import SQLAlchemyPaymentRepository
from .product_repository import SQLAlchemyProductRepository

DEFAULT_REPOSITORIES: Mapping[type, Callable[[ITransactionContext], Any]] = {
    ICartRepository: SQLAlchemyCartRepository,
    IProductRepository: SQLAlchemyProductRepository,
    IOrderRepository: SQLAlchemyOrderRepository,
    IDiscountRepository: SQLAlchemyDiscountRepository,
    IPaymentRepository: SQLAlchemyPaymentRepository,
}


def build_repository_registry(
    overrides: Mapping[type, Callable[[ITransactionContext], Any]] | None = None,
) -> dict[type, Callable[[ITransactionContext], Any]]:
    """Port -> repository factory map for SQLAlchemyUnitOfWork, with optional overrides."""
    return {**DEFAULT_REPOSITORIES, **(overrides or {})}


__all__ = [
    "DEFAULT_REPOSITORIES",
    "build_repository_registry",
    "rehydrate",
    "SQLAlchemyRepository",
    "SQLAlchemyCartRepository",
    "SQLAlchemyDiscountRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyPaymentRepository",
    "SQLAlchemyProductRepository",
]
