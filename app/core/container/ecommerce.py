"""
E-commerce Domain Container.

Single Responsibility: Wire all e-commerce domain dependencies.

One unit of work per logical request: `services()` opens it, builds every
service over it and closes it (rolling back anything not committed) when
the request ends.
"""

import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.core.interfaces import ITransactionContext
from app.database import SQLAlchemyUnitOfWork, TransactionHandler
from app.domains.ecommerce.application.discounts import DiscountStrategyFactory
from app.domains.ecommerce.application.ports import IDiscountRepository
from app.domains.ecommerce.application.services import (
    CartService,
    DiscountService,
    OrderService,
    PaymentService,
    ProductService,
    ShippingService,
)
from app.domains.ecommerce.infrastructure.repositories import build_repository_registry

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


@dataclass
class EcommerceServices:
    """Services sharing one unit of work."""

    unit_of_work: SQLAlchemyUnitOfWork
    products: ProductService
    carts: CartService
    discounts: DiscountService
    orders: OrderService
    payments: PaymentService
    shipping: ShippingService


class EcommerceContainer:
    """
    E-commerce domain container.

    Single Responsibility: Create units of work and the services bound to them.
    """

    def __init__(
        self,
        base: "BaseContainer",
        repository_overrides: Mapping[type, Callable[[ITransactionContext], Any]] | None = None,
    ):
        """
        Initialize e-commerce container.

        Args:
            base: BaseContainer with shared singletons
            repository_overrides: Optional port -> factory replacements
        """
        self._base = base
        self._registry = build_repository_registry(repository_overrides)

    # ==================== UNIT OF WORK ====================

    def create_unit_of_work(self) -> SQLAlchemyUnitOfWork:
        """Create an unstarted unit of work."""
        return SQLAlchemyUnitOfWork(self._base.get_session_factory(), self._registry)

    # ==================== SERVICES ====================

    def create_discount_strategies(self, unit_of_work: SQLAlchemyUnitOfWork) -> DiscountStrategyFactory:
        settings = self._base.settings
        return DiscountStrategyFactory(
            unit_of_work.get_repository(IDiscountRepository),
            max_recent=settings.DISCOUNT_MAX_RECENT,
            window_days=settings.DISCOUNT_RECENT_WINDOW_DAYS,
        )

    def create_services(self, unit_of_work: SQLAlchemyUnitOfWork) -> EcommerceServices:
        """Build every service over a started unit of work."""
        settings = self._base.settings
        strategies = self.create_discount_strategies(unit_of_work)
        discounts = DiscountService(unit_of_work)
        orders = OrderService(unit_of_work, discounts, strategies)

        return EcommerceServices(
            unit_of_work=unit_of_work,
            products=ProductService(unit_of_work, settings.SUPPORTED_CURRENCIES),
            carts=CartService(unit_of_work, strategies, settings.DEFAULT_CURRENCY),
            discounts=discounts,
            orders=orders,
            payments=PaymentService(
                unit_of_work,
                TransactionHandler(unit_of_work),
                orders,
                self._base.get_payment_methods(),
                self._base.get_email_sender(),
                refund_delay=settings.REFUND_PROCESSING_DELAY,
            ),
            shipping=ShippingService(self._base.get_postal_lookup(), settings.DEFAULT_CURRENCY),
        )

    @asynccontextmanager
    async def services(self) -> AsyncIterator[EcommerceServices]:
        """
        Request scope.

        Example:
            ```python
            async with container.ecommerce.services() as services:
                result = await services.payments.process_payment(request)
            ```
        """
        async with self.create_unit_of_work() as unit_of_work:
            yield self.create_services(unit_of_work)
