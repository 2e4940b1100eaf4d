"""
Unit Tests for the dependency container
"""

import pytest

from app.core.container import DependencyContainer


class TestDependencyContainer:
    @pytest.mark.asyncio
    async def test_each_container_owns_its_engine(self, test_settings):
        first = DependencyContainer(test_settings)
        second = DependencyContainer(test_settings)

        try:
            assert first.base.get_engine() is first.base.get_engine()
            assert first.base.get_engine() is not second.base.get_engine()
            assert first.base.get_session_factory() is first.base.get_session_factory()
        finally:
            await first.dispose()
            await second.dispose()

    @pytest.mark.asyncio
    async def test_dispose_releases_engine(self, test_settings):
        container = DependencyContainer(test_settings)
        engine = container.base.get_engine()

        await container.dispose()

        assert container.base.get_engine() is not engine
        await container.dispose()
