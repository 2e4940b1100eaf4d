"""
Shared pytest fixtures for all tests.

Database-backed fixtures run against a temporary SQLite file through
aiosqlite; unit tests use the mock unit of work from tests.utils.
"""

import os
import random
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from app.config.settings import Settings
from app.core.container import DependencyContainer
from app.database import create_tables

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database with no simulated latency."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        CREDIT_CARD_PROCESSING_DELAY=0.0,
        PAYPAL_PROCESSING_DELAY=0.0,
        REFUND_PROCESSING_DELAY=0.0,
        ORDER_TRACKING_BASE_URL="https://ecomify.test/orders",
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def container(test_settings: Settings) -> AsyncGenerator[DependencyContainer, None]:
    """Container over a freshly created schema, with a seeded order reference generator."""
    container = DependencyContainer(test_settings, rng=random.Random(42))
    await create_tables(container.base.get_engine())
    yield container
    await container.dispose()


@pytest_asyncio.fixture
async def unit_of_work(container: DependencyContainer):
    """Started unit of work; closing it discards anything left uncommitted."""
    async with container.ecommerce.create_unit_of_work() as uow:
        yield uow
