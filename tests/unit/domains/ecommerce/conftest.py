"""
Shared fixtures for e-commerce service tests.
"""

import pytest

from app.domains.ecommerce.application.discounts import DiscountStrategyFactory
from tests.utils import create_mock_repositories, create_mock_unit_of_work


@pytest.fixture
def repositories():
    return create_mock_repositories()


@pytest.fixture
def uow(repositories):
    return create_mock_unit_of_work(repositories)


@pytest.fixture
def discount_strategies(repositories):
    return DiscountStrategyFactory(repositories.discounts)


@pytest.fixture
def stored_orders(repositories):
    """Orders kept in memory behind the mocked order repository."""
    orders = {}

    def create_order(order):
        orders[order.id] = order
        return order.id

    repositories.orders.create_order.side_effect = create_order
    repositories.orders.get_by_id.side_effect = lambda order_id: orders.get(order_id)
    return orders
