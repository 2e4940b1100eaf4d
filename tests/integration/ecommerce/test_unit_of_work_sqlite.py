"""
Integration Tests for SQLAlchemyUnitOfWork over SQLite
"""

import pytest

from app.core.domain import ConfigurationException
from app.core.interfaces import ITransactionContext
from app.domains.ecommerce.application.ports import IEmailSender, IProductRepository
from tests.utils import ProductBuilder


async def _stored_stock(container, product_id):
    async with container.ecommerce.create_unit_of_work() as uow:
        product = await uow.get_repository(IProductRepository).get_by_id(product_id)
        return None if product is None else product.stock


class TestUnitOfWork:
    @pytest.mark.asyncio
    async def test_commit_is_visible_to_next_unit_of_work(self, container, unit_of_work):
        product = ProductBuilder().with_stock(7).build()

        await unit_of_work.get_repository(IProductRepository).create(product)
        await unit_of_work.commit()

        assert await _stored_stock(container, product.id) == 7

    @pytest.mark.asyncio
    async def test_rollback_discards_writes(self, container, unit_of_work):
        product = ProductBuilder().build()

        await unit_of_work.get_repository(IProductRepository).create(product)
        await unit_of_work.rollback()

        assert await _stored_stock(container, product.id) is None

    @pytest.mark.asyncio
    async def test_close_discards_uncommitted_work(self, container):
        product = ProductBuilder().build()

        async with container.ecommerce.create_unit_of_work() as uow:
            await uow.get_repository(IProductRepository).create(product)

        assert await _stored_stock(container, product.id) is None

    @pytest.mark.asyncio
    async def test_repositories_survive_commit(self, container, unit_of_work):
        # Arrange
        products = unit_of_work.get_repository(IProductRepository)
        first = ProductBuilder().build()
        second = ProductBuilder().build()

        # Act
        await products.create(first)
        await unit_of_work.commit()
        await products.create(second)
        await unit_of_work.commit()

        # Assert
        assert unit_of_work.get_repository(IProductRepository) is products
        assert await _stored_stock(container, second.id) == 10

    @pytest.mark.asyncio
    async def test_commit_is_deferred_while_controlled_externally(self, container, unit_of_work):
        product = ProductBuilder().build()
        unit_of_work.set_transaction_controlled_externally(True)

        await unit_of_work.get_repository(IProductRepository).create(product)
        await unit_of_work.commit()
        await unit_of_work.rollback()
        unit_of_work.set_transaction_controlled_externally(False)

        assert await _stored_stock(container, product.id) is None

    @pytest.mark.asyncio
    async def test_external_controller_can_commit(self, container, unit_of_work):
        product = ProductBuilder().build()
        unit_of_work.set_transaction_controlled_externally(True)

        await unit_of_work.get_repository(IProductRepository).create(product)
        await unit_of_work.commit(allow_external_commit=True)
        unit_of_work.set_transaction_controlled_externally(False)

        assert await _stored_stock(container, product.id) == 10

    @pytest.mark.asyncio
    async def test_unknown_port(self, unit_of_work):
        with pytest.raises(ConfigurationException):
            unit_of_work.get_repository(IEmailSender)

    @pytest.mark.asyncio
    async def test_context_reopens_transaction_after_commit_and_rollback(self, unit_of_work):
        context = unit_of_work.context

        await unit_of_work.commit()
        after_commit = context.is_active
        await unit_of_work.rollback()

        assert isinstance(context, ITransactionContext)
        assert after_commit
        assert context.is_active
        assert unit_of_work.context is context
