"""
Value objects of the e-commerce core: Money, Address and the status enum base.

Value objects are immutable and compared by value; they validate (and
normalize) themselves on construction.
"""

from abc import ABC
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self

from app.core.domain.exceptions import CurrencyMismatchException

CENTS = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round a decimal amount half-up to cents."""
    return amount.quantize(CENTS, ROUND_HALF_UP)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Frozen dataclass whose `_validate` hook runs after construction."""

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        pass


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object for financial calculations.

    A currency-tagged, non-negative decimal amount. Arithmetic between two
    Money values requires the same currency code; a mismatch raises
    CurrencyMismatchException instead of coercing.

    Example:
        ```python
        price = Money("BRL", Decimal("50.00"))
        total = price * 2 + Money("BRL", Decimal("10.00"))
        ```
    """

    currency_code: str
    amount: Decimal

    def _validate(self) -> None:
        """Validate money constraints."""
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation as e:
                raise ValueError(f"Invalid money amount: {self.amount!r}") from e
        if not self.amount.is_finite():
            raise ValueError("Money amount must be a finite number")
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not self.currency_code or len(self.currency_code.strip()) != 3 or not self.currency_code.strip().isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        object.__setattr__(self, "currency_code", self.currency_code.strip().upper())

    def _ensure_same_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {operation} Money and {type(other).__name__}")
        if self.currency_code != other.currency_code:
            raise CurrencyMismatchException(self.currency_code, other.currency_code, operation)

    def add(self, other: "Money") -> "Money":
        """Add two Money values (must be same currency)."""
        self._ensure_same_currency(other, "add")
        return Money(self.currency_code, self.amount + other.amount)

    def subtract(self, other: "Money") -> "Money":
        """Subtract Money (must be same currency, result cannot be negative)."""
        self._ensure_same_currency(other, "subtract")
        result = self.amount - other.amount
        if result < 0:
            raise ValueError("Result cannot be negative")
        return Money(self.currency_code, result)

    def multiply(self, factor: int | Decimal) -> "Money":
        """Multiply by a non-negative factor, rounding to cents."""
        new_amount = self.amount * Decimal(str(factor))
        return Money(self.currency_code, round_money(new_amount))

    def percentage(self, percentage: Decimal) -> "Money":
        """Return the given percentage (0-100) of this amount, rounded to cents."""
        percentage = Decimal(str(percentage))
        if percentage < 0 or percentage > 100:
            raise ValueError("Percentage must be between 0 and 100")
        return Money(self.currency_code, round_money(self.amount * percentage / Decimal("100")))

    def min(self, other: "Money") -> "Money":
        """Return the smaller of two amounts of the same currency."""
        self._ensure_same_currency(other, "compare")
        return self if self.amount <= other.amount else other

    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == Decimal("0")

    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > Decimal("0")

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: int | Decimal) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.currency_code} {self.amount:,.2f}"

    def __repr__(self) -> str:
        return f"Money(currency_code='{self.currency_code}', amount={self.amount})"

    @classmethod
    def zero(cls, currency_code: str = "BRL") -> "Money":
        """Create a zero Money value."""
        return cls(currency_code, Decimal("0"))

    @classmethod
    def of(cls, currency_code: str, amount: int | str | Decimal) -> "Money":
        """Create Money from an int, string or Decimal amount."""
        return cls(currency_code, Decimal(str(amount)))


@dataclass(frozen=True)
class Address(ValueObject):
    """Shipping or billing address (Brazilian layout, so `state` is a UF code)."""

    street: str
    number: str
    city: str
    state: str
    zip_code: str
    country: str = "Brasil"
    complement: str | None = None

    def _validate(self) -> None:
        missing = [name for name in ("street", "city", "state", "zip_code") if not (getattr(self, name) or "").strip()]
        if missing:
            raise ValueError(f"Address is missing: {', '.join(missing)}")
        object.__setattr__(self, "state", self.state.strip().upper())

    def __str__(self) -> str:
        street = f"{self.street}, {self.number}" if self.number else self.street
        return " - ".join(p for p in (street, self.complement, f"{self.city}/{self.state}", self.zip_code) if p)


class StatusEnum(str, Enum):
    """
    String enum persisted by value.

    Lifecycle enums override `transition_table`; a member with no outgoing
    transitions is terminal.
    """

    @classmethod
    def transition_table(cls) -> Mapping["StatusEnum", frozenset]:
        return {}

    def can_transition_to(self, target: Self) -> bool:
        return target in self.transition_table().get(self, frozenset())

    def valid_transitions(self) -> list[Self]:
        allowed = self.transition_table().get(self, frozenset())
        return [member for member in type(self) if member in allowed]

    def is_terminal(self) -> bool:
        return not self.transition_table().get(self)
