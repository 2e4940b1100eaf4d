"""
Cart Entity for E-commerce Domain

One shopping cart per user. Items are unique per product; totals are
always derived from the items, never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from app.core.domain import (
    AggregateRoot,
    Error,
    Money,
    Ok,
    Result,
    ValidationError,
    fail,
    generate_uuid,
)

from ..errors import CartErrors


@dataclass(eq=False)
class CartItem:
    """Line of a cart with the unit price captured when it was added."""

    product_id: UUID
    quantity: int
    unit_price: Money
    id: UUID = field(default_factory=generate_uuid)

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity


def _validate_quantity(quantity: int) -> ValidationError | None:
    if quantity <= 0:
        return Error.validation("Quantity must be greater than 0", "ERR_QUANTITY_INVALID", "quantity")
    return None


@dataclass(eq=False)
class Cart(AggregateRoot[UUID]):
    """
    Cart aggregate root.

    Example:
        ```python
        cart = Cart.create("user-1").value
        cart.add_item(product_id, 2, Money.of("BRL", "50.00"))
        cart.total_amount  # BRL 100.00
        ```
    """

    user_id: str = ""
    currency_code: str = "BRL"
    items: list[CartItem] = field(default_factory=list)
    discount_amount: Money | None = None

    @staticmethod
    def _validate(cart_id: UUID | None, user_id: str, currency_code: str) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if cart_id is None:
            errors.append(Error.validation("ID is required", "ERR_ID_REQUIRED", "id"))
        if not user_id or not user_id.strip():
            errors.append(Error.validation("User ID is required", "ERR_USER_ID_REQUIRED", "userId"))
        if not currency_code or len(currency_code) != 3:
            errors.append(Error.validation("Currency must be a 3-letter code", "ERR_CURRENCY", "currencyCode"))
        return errors

    @classmethod
    def create(cls, user_id: str, currency_code: str = "BRL") -> Result["Cart"]:
        """Create an empty cart for a user."""
        cart_id = generate_uuid()
        errors = cls._validate(cart_id, user_id, currency_code)
        if errors:
            return fail(errors)
        return Ok(cls(id=cart_id, user_id=user_id, currency_code=currency_code.upper()))

    @classmethod
    def from_(
        cls,
        cart_id: UUID,
        user_id: str,
        items: list[CartItem],
        created_at: datetime,
        updated_at: datetime | None = None,
        currency_code: str = "BRL",
        discount_amount: Money | None = None,
    ) -> Result["Cart"]:
        """Rehydrate a stored cart, re-checking its invariants."""
        errors = cls._validate(cart_id, user_id, currency_code)
        seen: set[UUID] = set()
        for item in items:
            if item.product_id in seen:
                errors.append(Error.validation("Duplicated product in cart", "ERR_DUPLICATED_ITEM", "items"))
            seen.add(item.product_id)
            error = _validate_quantity(item.quantity)
            if error:
                errors.append(error)
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=cart_id,
                user_id=user_id,
                currency_code=currency_code.upper(),
                items=list(items),
                discount_amount=discount_amount,
                created_at=created_at,
                updated_at=updated_at or created_at,
            )
        )

    @property
    def total_amount(self) -> Money:
        total = Money.zero(self.currency_code)
        for item in self.items:
            total = total + item.total_price
        return total

    @property
    def total_with_discount(self) -> Money:
        total = self.total_amount
        if self.discount_amount is None:
            return total
        return total - self.discount_amount.min(total)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def items_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, product_id: UUID) -> CartItem | None:
        return next((item for item in self.items if item.product_id == product_id), None)

    def add_item(self, product_id: UUID, quantity: int, unit_price: Money) -> Result[CartItem]:
        """
        Add a product to the cart.

        A product already in the cart has its quantity increased and keeps
        its original unit price.
        """
        error = _validate_quantity(quantity)
        if error:
            return fail(error)
        if unit_price.currency_code != self.currency_code:
            return fail(
                Error.validation(
                    f"Price currency {unit_price.currency_code} differs from cart currency {self.currency_code}",
                    "ERR_CURRENCY",
                    "currencyCode",
                )
            )

        item = self.find_item(product_id)
        if item is not None:
            item.quantity += quantity
        else:
            item = CartItem(product_id=product_id, quantity=quantity, unit_price=unit_price)
            self.items.append(item)
        self.touch()
        return Ok(item)

    def update_item_quantity(self, product_id: UUID, quantity: int) -> Result[CartItem]:
        error = _validate_quantity(quantity)
        if error:
            return fail(error)
        item = self.find_item(product_id)
        if item is None:
            return fail(CartErrors.cart_item_not_found(product_id))
        item.quantity = quantity
        self.touch()
        return Ok(item)

    def remove_item(self, product_id: UUID) -> Result[None]:
        item = self.find_item(product_id)
        if item is None:
            return fail(CartErrors.cart_item_not_found(product_id))
        self.items.remove(item)
        self.touch()
        return Ok(None)

    def apply_discount(self, amount: Money) -> None:
        """Record the discount applied to the cart (replaces any previous one)."""
        self.discount_amount = amount
        self.touch()

    def clear(self) -> None:
        self.items.clear()
        self.discount_amount = None
        self.touch()
