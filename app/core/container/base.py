"""
Base Container - Shared Singletons.

Single Responsibility: Manage process-wide resources (engine, session
factory, gateways, external clients). Per-request objects such as the
unit of work are built by the domain containers.
"""

import logging
import random

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.config.settings import Settings, get_settings
from app.database import create_async_database_engine, create_session_factory
from app.domains.ecommerce.application.payments import PaymentMethodFactory
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.infrastructure.external import ViaCepPostalCodeLookup
from app.domains.ecommerce.infrastructure.notifications import LoggingEmailSender

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache resources shared by every request.
    """

    def __init__(self, settings: Settings | None = None, rng: random.Random | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings (defaults to get_settings())
            rng: Optional random source for order references (seed it in tests)
        """
        self.settings = settings or get_settings()
        self._rng = rng

        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._payment_methods: PaymentMethodFactory | None = None
        self._postal_lookup: ViaCepPostalCodeLookup | None = None
        self._email_sender: LoggingEmailSender | None = None

        logger.info(f"BaseContainer initialized ({self.settings.ENVIRONMENT})")

    def get_engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_database_engine(self.settings)
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = create_session_factory(self.get_engine())
        return self._session_factory

    def get_payment_methods(self) -> PaymentMethodFactory:
        """Gateway registry; every gateway shares one order reference generator."""
        if self._payment_methods is None:
            self._payment_methods = PaymentMethodFactory.default(
                OrderIdGenerator(self._rng),
                credit_card_delay=self.settings.CREDIT_CARD_PROCESSING_DELAY,
                paypal_delay=self.settings.PAYPAL_PROCESSING_DELAY,
            )
        return self._payment_methods

    def get_postal_lookup(self) -> ViaCepPostalCodeLookup:
        if self._postal_lookup is None:
            self._postal_lookup = ViaCepPostalCodeLookup(
                self.settings.SHIPPING_LOOKUP_URL,
                timeout=self.settings.SHIPPING_TIMEOUT,
            )
        return self._postal_lookup

    def get_email_sender(self) -> LoggingEmailSender:
        if self._email_sender is None:
            self._email_sender = LoggingEmailSender(self.settings.ORDER_TRACKING_BASE_URL)
        return self._email_sender

    async def dispose(self) -> None:
        """Release the HTTP client and the database engine."""
        if self._postal_lookup is not None:
            await self._postal_lookup.close()
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("BaseContainer disposed")
