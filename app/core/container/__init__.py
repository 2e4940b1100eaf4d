"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.

This module is the facade that composes the domain-specific containers.
"""

from __future__ import annotations

import logging
import random

from app.config.settings import Settings

from .base import BaseContainer
from .ecommerce import EcommerceContainer, EcommerceServices

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    Shared resources: one engine and one set of gateways per container.
    """

    def __init__(self, settings: Settings | None = None, rng: random.Random | None = None):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings (defaults to get_settings())
            rng: Optional random source for order references
        """
        self._base = BaseContainer(settings, rng)
        self._ecommerce = EcommerceContainer(self._base)

        logger.info("DependencyContainer initialized")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    @property
    def ecommerce(self) -> EcommerceContainer:
        return self._ecommerce

    async def dispose(self) -> None:
        await self._base.dispose()


__all__ = [
    "DependencyContainer",
    "BaseContainer",
    "EcommerceContainer",
    "EcommerceServices",
]
