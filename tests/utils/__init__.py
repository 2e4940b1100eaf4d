"""Test utilities and helpers."""

from tests.utils.assertions import assert_err, assert_field_error, assert_ok
from tests.utils.builders import (
    CartBuilder,
    DiscountBuilder,
    OrderBuilder,
    ProductBuilder,
    make_address,
)
from tests.utils.factories import create_mock_repositories, create_mock_unit_of_work

__all__ = [
    # Builders
    "ProductBuilder",
    "CartBuilder",
    "DiscountBuilder",
    "OrderBuilder",
    "make_address",
    # Factories
    "create_mock_repositories",
    "create_mock_unit_of_work",
    # Assertions
    "assert_ok",
    "assert_err",
    "assert_field_error",
]
