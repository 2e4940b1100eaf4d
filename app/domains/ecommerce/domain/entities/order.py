"""
Order Entity for E-commerce Domain

Represents a customer order with items, addresses and status lifecycle.
Item prices are a snapshot taken at purchase time.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from app.core.domain import (
    Address,
    AggregateRoot,
    Error,
    Money,
    Ok,
    Result,
    ValidationError,
    fail,
    generate_uuid,
    utc_now,
)

from ..errors import OrderErrors
from ..value_objects.order_status import OrderStatus


@dataclass(eq=False)
class OrderItem:
    """
    Individual item in an order.

    Represents a line item with product, quantity, and the unit price
    paid at purchase.
    """

    product_id: UUID
    quantity: int
    unit_price: Money
    id: UUID = field(default_factory=generate_uuid)

    @property
    def total_price(self) -> Money:
        """Calculate item subtotal."""
        return self.unit_price * self.quantity


@dataclass(eq=False)
class Order(AggregateRoot[UUID]):
    """
    Order aggregate root for e-commerce domain.

    Manages order lifecycle and items.

    Example:
        ```python
        order = Order.create("user-1", address, address).value
        order.add_item(product.id, 2, product.price)
        order.process_payment()
        order.confirm_payment()
        order.ship()
        ```
    """

    user_id: str = ""
    order_date: datetime = field(default_factory=utc_now)
    status: OrderStatus = OrderStatus.CREATED
    currency_code: str = "BRL"

    # Addresses
    shipping_address: Address | None = None
    billing_address: Address | None = None

    items: list[OrderItem] = field(default_factory=list)
    discount_amount: Money | None = None
    completed_at: datetime | None = None

    @staticmethod
    def _validate(
        order_id: UUID | None,
        user_id: str,
        shipping_address: Address | None,
        billing_address: Address | None,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if order_id is None:
            errors.append(Error.validation("Id is required", "ERR_ID_REQUIRED", "id"))
        if not user_id or not user_id.strip():
            errors.append(Error.validation("User ID is required", "ERR_USER_ID_REQUIRED", "userId"))
        if shipping_address is None:
            errors.append(
                Error.validation("Shipping address is required", "ERR_SHIPPING_ADDRESS_REQUIRED", "shippingAddress")
            )
        if billing_address is None:
            errors.append(
                Error.validation("Billing address is required", "ERR_BILLING_ADDRESS_REQUIRED", "billingAddress")
            )
        return errors

    @classmethod
    def create(
        cls,
        user_id: str,
        shipping_address: Address | None,
        billing_address: Address | None,
        currency_code: str = "BRL",
    ) -> Result["Order"]:
        order_id = generate_uuid()
        errors = cls._validate(order_id, user_id, shipping_address, billing_address)
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=order_id,
                user_id=user_id,
                currency_code=currency_code.upper(),
                shipping_address=shipping_address,
                billing_address=billing_address,
            )
        )

    @classmethod
    def from_(
        cls,
        order_id: UUID,
        user_id: str,
        order_date: datetime,
        status: OrderStatus,
        shipping_address: Address | None,
        billing_address: Address | None,
        items: list[OrderItem],
        created_at: datetime,
        completed_at: datetime | None = None,
        currency_code: str = "BRL",
        discount_amount: Money | None = None,
    ) -> Result["Order"]:
        errors = cls._validate(order_id, user_id, shipping_address, billing_address)
        for item in items:
            if item.quantity <= 0:
                errors.append(Error.validation("Quantity must be greater than 0", "ERR_QUANTITY_INVALID", "items"))
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=order_id,
                user_id=user_id,
                order_date=order_date,
                status=status,
                currency_code=currency_code.upper(),
                shipping_address=shipping_address,
                billing_address=billing_address,
                items=list(items),
                discount_amount=discount_amount,
                created_at=created_at,
                updated_at=created_at,
                completed_at=completed_at,
            )
        )

    # Items

    def add_item(self, product_id: UUID, quantity: int, unit_price: Money) -> Result[OrderItem]:
        """Add a line, merging with an existing line for the same product."""
        if self.status != OrderStatus.CREATED:
            return fail(
                Error.failure("Items can only be added to a newly created order.", "ERR_ORDER_NOT_EDITABLE")
            )
        if quantity <= 0:
            return fail(Error.validation("Quantity must be greater than 0", "ERR_QUANTITY_INVALID", "quantity"))
        if unit_price.currency_code != self.currency_code:
            return fail(
                Error.validation(
                    f"Price currency {unit_price.currency_code} differs from order currency {self.currency_code}",
                    "ERR_CURRENCY",
                    "currencyCode",
                )
            )

        for item in self.items:
            if item.product_id == product_id:
                item.quantity += quantity
                self.touch()
                return Ok(item)

        item = OrderItem(product_id=product_id, quantity=quantity, unit_price=unit_price)
        self.items.append(item)
        self.touch()
        return Ok(item)

    # Totals

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

    def apply_discount(self, amount: Money) -> None:
        """Accumulate a discount, never beyond the order total."""
        current = self.discount_amount or Money.zero(self.currency_code)
        self.discount_amount = (current + amount).min(self.total_amount)
        self.touch()

    # Status lifecycle

    def _transition(self, target: OrderStatus, allowed_from: tuple[OrderStatus, ...] | None = None) -> Result[None]:
        if allowed_from is not None and self.status not in allowed_from:
            return fail(OrderErrors.status_transition(self.status.value, target.value))
        if not self.status.can_transition_to(target):
            return fail(OrderErrors.status_transition(self.status.value, target.value))
        self.status = target
        if target == OrderStatus.COMPLETED:
            self.completed_at = utc_now()
        self.touch()
        return Ok(None)

    def process_payment(self) -> Result[None]:
        """Payment started."""
        return self._transition(OrderStatus.PROCESSING, (OrderStatus.CREATED, OrderStatus.PENDING))

    def confirm_payment(self) -> Result[None]:
        return self._transition(OrderStatus.CONFIRMED, (OrderStatus.PROCESSING,))

    def fail_payment(self) -> Result[None]:
        return self._transition(OrderStatus.CANCELLED, (OrderStatus.PROCESSING,))

    def ship(self) -> Result[None]:
        return self._transition(OrderStatus.SHIPPED)

    def complete(self) -> Result[None]:
        return self._transition(OrderStatus.COMPLETED)

    def cancel(self) -> Result[None]:
        return self._transition(OrderStatus.CANCELLED)

    def refund(self) -> Result[None]:
        return self._transition(OrderStatus.REFUNDED)

    def update_status(self, status: OrderStatus) -> Result[None]:
        """Move to any status the lifecycle allows; the current status is a no-op."""
        if status == self.status:
            return Ok(None)
        return self._transition(status)

    def is_editable(self) -> bool:
        return self.status == OrderStatus.CREATED

    def update_shipping_address(self, address: Address) -> None:
        self.shipping_address = address
        self.touch()

    def update_billing_address(self, address: Address) -> None:
        self.billing_address = address
        self.touch()
