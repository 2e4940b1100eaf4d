"""
Application entry point.

All configuration and lifecycle management is delegated to the app factory.
"""

import logging

from app.config.settings import get_settings
from app.core.app_factory import create_app

logger = logging.getLogger(__name__)
settings = get_settings()

app = create_app(settings, create_schema=settings.is_sqlite)

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.DEBUG,
    )
