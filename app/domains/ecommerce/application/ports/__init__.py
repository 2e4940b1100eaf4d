"""
Ecommerce Application Ports

Interface definitions (ports) for the Ecommerce domain.
Uses Protocol for structural typing.

Repositories are bound to the transaction context of the unit of work
that created them; they flush but never commit. Lookups return None for
"not found" instead of raising.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.interfaces import IRepository
from app.domains.ecommerce.domain.entities import (
    Cart,
    Category,
    Discount,
    DiscountHistory,
    Order,
    PaymentRecord,
    Product,
)
from app.domains.ecommerce.domain.value_objects import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentStatusChange,
)


@runtime_checkable
class ICartRepository(IRepository, Protocol):
    """
    Interface for cart repository.

    Defines the contract for cart data access.
    """

    async def get_by_user(self, user_id: str) -> Cart | None:
        """Get the cart of a user"""
        ...

    async def create(self, cart: Cart) -> None:
        """Persist a new cart"""
        ...

    async def update(self, cart: Cart) -> None:
        """Persist cart items and applied discount"""
        ...


@runtime_checkable
class IProductRepository(IRepository, Protocol):
    """
    Interface for product repository.

    Defines the contract for product and category data access.
    """

    async def get_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID"""
        ...

    async def list_products(self, page: int = 1, page_size: int = 20) -> tuple[list[Product], int]:
        """List products with the total count"""
        ...

    async def get_low_stock(self, threshold: int, page: int = 1, page_size: int = 20) -> tuple[list[Product], int]:
        """List products whose stock is at or below threshold"""
        ...

    async def create(self, product: Product) -> UUID:
        """Persist a new product and return its id"""
        ...

    async def update(self, product: Product) -> None:
        """Persist product changes"""
        ...

    async def delete(self, product_id: UUID) -> bool:
        """Delete a product, True if it existed"""
        ...

    async def get_categories(self) -> list[Category]:
        """Get all categories"""
        ...

    async def get_category_by_id(self, category_id: UUID) -> Category | None:
        """Get category by ID"""
        ...

    async def create_category(self, category: Category) -> UUID:
        """Persist a new category"""
        ...


@runtime_checkable
class IOrderRepository(IRepository, Protocol):
    """
    Interface for order repository.

    Defines the contract for order data access.
    """

    async def create_order(self, order: Order) -> UUID:
        """Persist the order header and return the new order id"""
        ...

    async def create_order_items(self, order: Order) -> None:
        """Persist the items of an already created order"""
        ...

    async def get_by_id(self, order_id: UUID) -> Order | None:
        """Get order by ID"""
        ...

    async def get_by_user(self, user_id: str) -> list[Order]:
        """Get orders of a user, newest first"""
        ...

    async def filter(
        self,
        user_id: str | None = None,
        status: OrderStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Order], int]:
        """Filter orders with the total count"""
        ...

    async def count(self) -> int:
        """Count all orders"""
        ...

    async def update(self, order: Order) -> None:
        """Persist order status, discount and completion date"""
        ...

    async def delete(self, order_id: UUID) -> bool:
        """Delete an order and its items"""
        ...


@runtime_checkable
class IDiscountRepository(IRepository, Protocol):
    """
    Interface for discount repository.

    Defines the contract for discounts, their cart links and history.
    """

    async def get_by_id(self, discount_id: UUID) -> Discount | None:
        """Get discount by ID"""
        ...

    async def get_by_code(self, code: str) -> Discount | None:
        """Get discount by coupon code"""
        ...

    async def filter(
        self,
        code: str | None = None,
        discount_type: Any | None = None,
        is_active: bool | None = None,
        auto_apply: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Discount], int]:
        """Filter discounts with the total count"""
        ...

    async def create(self, discount: Discount) -> UUID:
        """Persist a new discount and its category links"""
        ...

    async def update(self, discount: Discount) -> None:
        """Persist discount changes"""
        ...

    async def delete(self, discount_id: UUID) -> None:
        """Delete a discount"""
        ...

    async def get_discounts_to_apply(
        self,
        cart_id: UUID,
        cart_total: Decimal,
        customer_id: str,
        product_ids: list[UUID],
    ) -> list[Discount]:
        """Usable discounts linked to the cart plus matching auto-apply ones"""
        ...

    async def apply_to_cart(self, cart_id: UUID, discount_id: UUID) -> None:
        """Link a discount to a cart"""
        ...

    async def clear_applied_discounts(self, cart_id: UUID) -> None:
        """Remove every discount linked to a cart"""
        ...

    async def count_customer_usages(self, customer_id: str, discount_id: UUID | None = None) -> int:
        """Count history rows of a customer, optionally for one discount"""
        ...

    async def count_recent_by_customer(self, customer_id: str, since: datetime) -> int:
        """Count discounts applied to a customer since a date"""
        ...

    async def create_history(self, history: DiscountHistory) -> None:
        """Persist a discount history record"""
        ...

    async def get_history_by_order(self, order_id: UUID) -> list[DiscountHistory]:
        """Get discount history of an order"""
        ...

    async def has_history(self, discount_id: UUID) -> bool:
        """Check whether a discount was ever applied"""
        ...


@runtime_checkable
class IPaymentRepository(IRepository, Protocol):
    """
    Interface for payment repository.

    Defines the contract for payment records and their status history.
    """

    async def create(self, payment: PaymentRecord) -> UUID:
        """Persist a payment record (without history) and return its id"""
        ...

    async def create_status_history(self, payment_id: UUID, change: PaymentStatusChange) -> None:
        """Append one status history row"""
        ...

    async def update(self, payment: PaymentRecord) -> None:
        """Persist payment status"""
        ...

    async def get_by_id(self, payment_id: UUID) -> PaymentRecord | None:
        """Get payment by ID"""
        ...

    async def get_by_transaction_id(self, transaction_id: UUID) -> PaymentRecord | None:
        """Get payment by gateway transaction ID"""
        ...

    async def get_by_order(self, order_id: UUID) -> list[PaymentRecord]:
        """Get payments of an order"""
        ...

    async def get_by_customer(self, user_id: str) -> list[PaymentRecord]:
        """Get payments of a customer's orders"""
        ...

    async def filter(
        self,
        status: PaymentStatus | None = None,
        payment_method: PaymentMethod | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[PaymentRecord], int]:
        """Filter payments with the total count"""
        ...


@runtime_checkable
class IEmailSender(Protocol):
    """
    Interface for customer notifications.

    Fire-and-forget: callers never depend on the outcome.
    """

    async def send_order_confirmation(self, user_id: str, order_id: UUID, reference: str, amount: str) -> None:
        """Notify a placed and paid order"""
        ...

    async def send_payment_cancellation(self, user_id: str, order_id: UUID, transaction_id: UUID) -> None:
        """Notify a cancelled payment"""
        ...

    async def send_payment_refund(self, user_id: str, order_id: UUID, transaction_id: UUID, amount: str) -> None:
        """Notify a refunded payment"""
        ...


@runtime_checkable
class IPostalCodeLookup(Protocol):
    """
    Interface for the postal code lookup service.
    """

    async def lookup(self, zip_code: str) -> dict[str, Any] | None:
        """Address data for a zip code, None when the zip code is unknown"""
        ...


__all__ = [
    "ICartRepository",
    "IProductRepository",
    "IOrderRepository",
    "IDiscountRepository",
    "IPaymentRepository",
    "IEmailSender",
    "IPostalCodeLookup",
]
