"""
Unit Tests for payment input validation and order references
"""

import random
from datetime import UTC, date, datetime

import pytest

from app.domains.ecommerce.domain.services import (
    OrderIdGenerator,
    is_valid_card_number,
    is_valid_expiration_date,
    validate_credit_card,
    validate_paypal,
)

TODAY = date(2026, 10, 19)


class TestCardValidation:
    @pytest.mark.parametrize("number", ["4111111111111111", "4111 1111 1111 1111", "5500-0000-0000-0004"])
    def test_luhn_accepts_valid_numbers(self, number):
        assert is_valid_card_number(number)

    @pytest.mark.parametrize("number", ["1234567890123456", "4111111111111112", "41111111", "abcd", None])
    def test_luhn_rejects_invalid_numbers(self, number):
        assert not is_valid_card_number(number)

    @pytest.mark.parametrize(
        "expiry, valid",
        [("10/26", True), ("12/28", True), ("09/26", False), ("13/27", False), ("1227", False), ("aa/bb", False)],
    )
    def test_expiration_date(self, expiry, valid):
        assert is_valid_expiration_date(expiry, TODAY) is valid

    def test_invalid_card_number_reports_card_number_field(self):
        errors = validate_credit_card("1234567890123456", "12/28", "123", TODAY)

        assert [(e.field, e.code) for e in errors] == [("CardNumber", "ERR_INVALID_CARD_NUMBER")]

    def test_missing_fields(self):
        errors = validate_credit_card("", " ", None, TODAY)

        assert [e.code for e in errors] == ["ERR_CARD_NUMBER_REQUIRED", "ERR_EXP_DATE_REQUIRED", "ERR_CVV_REQUIRED"]

    def test_cvv_format(self):
        errors = validate_credit_card("4111111111111111", "12/28", "12", TODAY)

        assert [e.code for e in errors] == ["ERR_INVALID_CVV"]


class TestPayPalValidation:
    def test_valid_payer(self):
        assert validate_paypal("payer@ecomify.test", "PAYER-1") == []

    def test_invalid_payer(self):
        errors = validate_paypal("not-an-email", "")

        assert [e.code for e in errors] == ["ERR_INVALID_PAYER_EMAIL", "ERR_PAYER_ID_REQUIRED"]


class TestOrderIdGenerator:
    def test_format(self):
        generator = OrderIdGenerator(random.Random(1), clock=lambda: datetime(2026, 10, 19, tzinfo=UTC))

        reference = generator.generate()

        prefix, day, suffix = reference.split("-")
        assert prefix == "ORD"
        assert day == "20261019"
        assert suffix[:3].isalpha() and suffix[:3].isupper()
        assert suffix[3:].isdigit() and len(suffix) == 6

    def test_seeded_generators_are_reproducible(self):
        clock = lambda: datetime(2026, 10, 19, tzinfo=UTC)  # noqa: E731
        first = OrderIdGenerator(random.Random(42), clock)
        second = OrderIdGenerator(random.Random(42), clock)

        assert [first.generate() for _ in range(3)] == [second.generate() for _ in range(3)]
