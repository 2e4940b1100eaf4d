import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import Settings, get_settings
from app.database.base import Base

logger = logging.getLogger(__name__)


def create_async_database_engine(settings: Settings | None = None) -> AsyncEngine:
    """Crea el engine de base de datos asíncrono"""
    settings = settings or get_settings()
    try:
        engine_config: dict = {
            "echo": settings.DB_ECHO,
            "pool_pre_ping": True,
        }

        if settings.is_sqlite:
            # SQLite (aiosqlite) for local runs and tests: no server-side pool tuning
            logger.info("Creating async database engine for SQLite")
        elif settings.is_development:
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config["poolclass"] = NullPool
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )

        return create_async_engine(settings.DATABASE_URL, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session maker asíncrono: sin autoflush, los repositorios hacen flush explícito"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Crea todas las tablas registradas en Base.metadata"""
    # Models register themselves on import
    from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

