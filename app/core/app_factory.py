"""
Application factory for FastAPI.

Builds the HTTP shell around the e-commerce core: logging, the dependency
container lifecycle, exception handlers and a health endpoint. Business
routes are mounted by the hosting application.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import Settings, get_settings
from app.core.container import DependencyContainer
from app.core.shared.logger import configure_logging
from app.database import create_tables
from app.domains.ecommerce.api.errors import register_exception_handlers

logger = logging.getLogger(__name__)


class AppFactory:
    """
    Factory for creating and configuring FastAPI applications.

    Each configuration step is handled by a dedicated method.
    """

    def __init__(self, settings: Settings | None = None, create_schema: bool = False) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses default if not provided)
            create_schema: Create missing tables on startup (local SQLite runs)
        """
        self._settings = settings or get_settings()
        self._create_schema = create_schema

    def create_app(self) -> FastAPI:
        configure_logging(self._settings.LOG_LEVEL, self._settings.LOG_FORMAT, self._settings.LOG_FILE)

        app = FastAPI(
            title=self._settings.PROJECT_NAME,
            version=self._settings.VERSION,
            docs_url="/docs" if self._settings.DEBUG else None,
            redoc_url=None,
            lifespan=self._lifespan,
        )
        register_exception_handlers(app, self._settings)
        self._configure_health_endpoint(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME}")
        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        container = DependencyContainer(self._settings)
        app.state.container = container
        if self._create_schema:
            await create_tables(container.base.get_engine())
        logger.info(f"Starting {self._settings.PROJECT_NAME} ({self._settings.ENVIRONMENT})")
        try:
            yield
        finally:
            await container.dispose()
            logger.info("Application shutdown complete")

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            return {
                "status": "ok",
                "environment": self._settings.ENVIRONMENT,
            }


def create_app(settings: Settings | None = None, create_schema: bool = False) -> FastAPI:
    """
    Create FastAPI application using the factory.

    Args:
        settings: Optional settings override
        create_schema: Create missing tables on startup

    Returns:
        Configured FastAPI application
    """
    return AppFactory(settings, create_schema).create_app()
