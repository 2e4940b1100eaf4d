"""
Ecommerce Application DTOs

Data Transfer Objects for the Ecommerce domain.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Generic, TypeVar
from uuid import UUID

from app.core.domain import Address, Money
from app.domains.ecommerce.domain.value_objects import (
    DiscountType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
)

T = TypeVar("T")


# ==================== Common DTOs ====================


@dataclass
class PageResult(Generic[T]):
    """One page of a listing"""

    items: list[T]
    total_count: int
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


# ==================== Product DTOs ====================


@dataclass
class CreateProductRequest:
    """Request to create a product"""

    name: str
    description: str
    price: Decimal
    stock: int
    image_url: str
    currency_code: str = "BRL"
    status: ProductStatus = ProductStatus.ACTIVE
    categories: set[UUID] = field(default_factory=set)


@dataclass
class UpdateProductRequest:
    """Request to update a product; None leaves a field unchanged"""

    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    currency_code: str | None = None
    stock: int | None = None
    image_url: str | None = None
    status: ProductStatus | None = None
    categories: set[UUID] | None = None


# ==================== Order DTOs ====================


@dataclass
class CreateOrderRequest:
    """Request to turn a user's cart into an order"""

    user_id: str
    shipping_address: Address
    billing_address: Address


@dataclass
class OrderFilter:
    """Order listing filter"""

    user_id: str | None = None
    status: OrderStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = 1
    page_size: int = 20


# ==================== Discount DTOs ====================


@dataclass
class CreateDiscountRequest:
    """Request to create a discount"""

    discount_type: DiscountType
    max_uses: int
    min_order_amount: Decimal
    max_uses_per_user: int
    valid_from: datetime
    valid_to: datetime
    code: str | None = None
    fixed_amount: Decimal | None = None
    percentage: Decimal | None = None
    auto_apply: bool = False
    categories: set[UUID] = field(default_factory=set)


@dataclass
class DiscountFilter:
    """Discount listing filter"""

    code: str | None = None
    discount_type: DiscountType | None = None
    is_active: bool | None = None
    auto_apply: bool | None = None
    page: int = 1
    page_size: int = 20


# ==================== Payment DTOs ====================


@dataclass(frozen=True)
class CreditCardPaymentDetails:
    """Card data supplied by the customer"""

    card_number: str
    expiration_date: str
    cvv: str


@dataclass(frozen=True)
class PayPalPaymentDetails:
    """PayPal payer supplied by the customer"""

    payer_email: str
    payer_id: str


PaymentDetails = CreditCardPaymentDetails | PayPalPaymentDetails


@dataclass
class ProcessPaymentRequest:
    """Request to pay for the user's cart"""

    user_id: str
    payment_method: PaymentMethod
    shipping_address: Address
    billing_address: Address
    details: PaymentDetails | None = None


@dataclass
class PaymentResult:
    """Outcome of a processed payment"""

    order_id: UUID
    payment_id: UUID
    transaction_id: UUID
    reference: str
    status: PaymentStatus
    amount: Money


@dataclass
class PaymentFilter:
    """Payment listing filter"""

    status: PaymentStatus | None = None
    payment_method: PaymentMethod | None = None
    page: int = 1
    page_size: int = 20


# ==================== Shipping DTOs ====================


@dataclass
class ShippingEstimate:
    """Flat-rate shipping quote for a zip code"""

    zip_code: str
    state: str
    city: str
    cost: Money
    delivery_days: int
    service: str = "PAC"
