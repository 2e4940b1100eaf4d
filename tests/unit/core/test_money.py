"""
Unit Tests for the Money value object
"""

from decimal import Decimal

import pytest

from app.core.domain import CurrencyMismatchException, Money


class TestMoneyConstruction:
    def test_normalizes_currency_and_amount(self):
        money = Money("brl", 10)

        assert money.currency_code == "BRL"
        assert money.amount == Decimal("10")

    def test_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money("BRL", Decimal("-0.01"))

    @pytest.mark.parametrize("code", ["", "BR", "REAL", "12A"])
    def test_rejects_invalid_currency(self, code):
        with pytest.raises(ValueError):
            Money(code, Decimal("1"))

    def test_zero(self):
        assert Money.zero("USD").is_zero()
        assert not Money.zero("USD").is_positive()


class TestMoneyArithmetic:
    def test_add_and_subtract_same_currency(self):
        a = Money.of("BRL", "10.50")
        b = Money.of("BRL", "4.25")

        assert (a + b).amount == Decimal("14.75")
        assert (a - b).amount == Decimal("6.25")

    def test_mixing_currencies_raises(self):
        with pytest.raises(CurrencyMismatchException):
            Money.of("BRL", "1") + Money.of("USD", "1")

    def test_subtract_below_zero_raises(self):
        with pytest.raises(ValueError):
            Money.of("BRL", "1") - Money.of("BRL", "2")

    def test_multiply_rounds_half_up_to_cents(self):
        assert (Money.of("BRL", "0.125") * 1).amount == Decimal("0.13")
        assert (3 * Money.of("BRL", "19.99")).amount == Decimal("59.97")

    def test_percentage(self):
        assert Money.of("BRL", "200.00").percentage(Decimal("12.5")).amount == Decimal("25.00")

    def test_percentage_out_of_range(self):
        with pytest.raises(ValueError):
            Money.of("BRL", "10").percentage(Decimal("101"))

    def test_min_and_comparisons(self):
        small = Money.of("BRL", "5")
        big = Money.of("BRL", "7")

        assert small.min(big) is small
        assert small < big
        assert big >= small

    def test_equality_is_by_value(self):
        assert Money.of("BRL", "10") == Money.of("BRL", "10.00")

    def test_str(self):
        assert str(Money.of("BRL", "1234.5")) == "BRL 1,234.50"
