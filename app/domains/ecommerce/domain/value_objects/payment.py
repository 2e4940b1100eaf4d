"""
Payment Value Objects

Payment method enum, the method-specific details stored with a payment
record, status history entries and the gateway response.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from app.core.domain import StatusEnum, ValueObject, generate_uuid, utc_now

from .order_status import PaymentStatus


class PaymentMethod(StatusEnum):
    """Supported payment methods."""

    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    PIX = "pix"

    @property
    def description(self) -> str:
        return _METHOD_DESCRIPTIONS[self]


_METHOD_DESCRIPTIONS = {
    PaymentMethod.CREDIT_CARD: "Credit Card",
    PaymentMethod.PAYPAL: "PayPal",
    PaymentMethod.PIX: "Pix",
}


def card_brand(card_number: str) -> str:
    """Card brand from the leading digit."""
    digits = "".join(c for c in card_number if c.isdigit())
    if digits.startswith("4"):
        return "Visa"
    if digits.startswith("5"):
        return "MasterCard"
    if digits.startswith("3"):
        return "American Express"
    return "Unknown"


@dataclass(frozen=True)
class CreditCardMethodDetails(ValueObject):
    """Card data kept with a payment: never the full number."""

    last_four_digits: str
    card_brand: str

    def _validate(self) -> None:
        if len(self.last_four_digits) != 4 or not self.last_four_digits.isdigit():
            raise ValueError("Last four digits must be exactly 4 digits")
        if not self.card_brand:
            raise ValueError("Card brand is required")

    @classmethod
    def from_card_number(cls, card_number: str) -> "CreditCardMethodDetails":
        digits = "".join(c for c in card_number if c.isdigit())
        return cls(last_four_digits=digits[-4:], card_brand=card_brand(digits))


@dataclass(frozen=True)
class PayPalMethodDetails(ValueObject):
    """PayPal payer data kept with a payment."""

    payer_email: str
    payer_id: str

    def _validate(self) -> None:
        if not self.payer_email or "@" not in self.payer_email:
            raise ValueError(f"Invalid PayPal email: {self.payer_email}")
        if not self.payer_id:
            raise ValueError("PayPal payer id is required")
        object.__setattr__(self, "payer_email", self.payer_email.strip().lower())


PaymentMethodDetails = CreditCardMethodDetails | PayPalMethodDetails


@dataclass(frozen=True)
class PaymentStatusChange(ValueObject):
    """One entry of a payment's append-only status history."""

    status: PaymentStatus
    reference: str | None = None
    occurred_at: datetime = field(default_factory=utc_now)
    id: UUID = field(default_factory=generate_uuid)


@dataclass(frozen=True)
class GatewayResponse(ValueObject):
    """Outcome of a gateway call."""

    transaction_id: UUID
    reference: str
    is_success: bool

    def _validate(self) -> None:
        if not self.reference:
            raise ValueError("Gateway reference is required")
