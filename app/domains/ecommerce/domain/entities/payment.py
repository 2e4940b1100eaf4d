"""
Payment Record Entity for E-commerce Domain

Result of a gateway call for one order. Every status change is appended
to the status history; nothing is overwritten.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.core.domain import (
    AggregateRoot,
    Error,
    Money,
    Ok,
    Result,
    fail,
    generate_uuid,
    utc_now,
)

from ..errors import PaymentErrors
from ..value_objects.order_status import PaymentStatus
from ..value_objects.payment import (
    CreditCardMethodDetails,
    PaymentMethod,
    PaymentMethodDetails,
    PaymentStatusChange,
    PayPalMethodDetails,
)

_CARD_GATEWAY_STATUSES = {
    "approved": PaymentStatus.SUCCEEDED,
    "pending": PaymentStatus.PROCESSING,
    "declined": PaymentStatus.FAILED,
    "refunded": PaymentStatus.REFUNDED,
}

_PAYPAL_GATEWAY_STATUSES = {
    "completed": PaymentStatus.SUCCEEDED,
    "pending": PaymentStatus.PROCESSING,
    "failed": PaymentStatus.FAILED,
    "refunded": PaymentStatus.REFUNDED,
}

_GATEWAY_STATUS_MAPS = {
    PaymentMethod.CREDIT_CARD: _CARD_GATEWAY_STATUSES,
    PaymentMethod.PAYPAL: _PAYPAL_GATEWAY_STATUSES,
}


@dataclass(eq=False)
class PaymentRecord(AggregateRoot[UUID]):
    """
    Payment record aggregate root.

    State machine:
        PROCESSING -> SUCCEEDED | FAILED | CANCELLED
        SUCCEEDED -> REFUND_REQUESTED | CANCELLED
        REFUND_REQUESTED -> REFUNDED
    """

    order_id: UUID | None = None
    amount: Money = field(default_factory=Money.zero)
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    transaction_id: UUID | None = None
    processed_at: datetime = field(default_factory=utc_now)
    status: PaymentStatus = PaymentStatus.PROCESSING
    gateway_response: str = ""
    method_details: PaymentMethodDetails | None = None
    status_history: list[PaymentStatusChange] = field(default_factory=list)

    @property
    def payment_id(self) -> UUID | None:
        return self.id

    @classmethod
    def _new(
        cls,
        order_id: UUID,
        amount: Money,
        payment_method: PaymentMethod,
        transaction_id: UUID,
        gateway_response: str,
        method_details: PaymentMethodDetails | None,
    ) -> "PaymentRecord":
        record = cls(
            id=generate_uuid(),
            order_id=order_id,
            amount=amount,
            payment_method=payment_method,
            transaction_id=transaction_id,
            gateway_response=gateway_response,
            method_details=method_details,
        )
        record.status_history.append(PaymentStatusChange(status=PaymentStatus.PROCESSING))
        return record

    @classmethod
    def create_credit_card_payment(
        cls,
        order_id: UUID,
        amount: Money,
        transaction_id: UUID,
        last_four_digits: str,
        card_brand: str,
        gateway_response: str,
    ) -> "PaymentRecord":
        details = CreditCardMethodDetails(last_four_digits=last_four_digits, card_brand=card_brand)
        return cls._new(order_id, amount, PaymentMethod.CREDIT_CARD, transaction_id, gateway_response, details)

    @classmethod
    def create_paypal_payment(
        cls,
        order_id: UUID,
        amount: Money,
        transaction_id: UUID,
        payer_email: str,
        payer_id: str,
        gateway_response: str,
    ) -> "PaymentRecord":
        details = PayPalMethodDetails(payer_email=payer_email, payer_id=payer_id)
        return cls._new(order_id, amount, PaymentMethod.PAYPAL, transaction_id, gateway_response, details)

    @classmethod
    def create_pix_payment(
        cls,
        order_id: UUID,
        amount: Money,
        transaction_id: UUID,
        gateway_response: str,
    ) -> "PaymentRecord":
        return cls._new(order_id, amount, PaymentMethod.PIX, transaction_id, gateway_response, None)

    @classmethod
    def from_(
        cls,
        payment_id: UUID,
        order_id: UUID,
        amount: Money,
        payment_method: PaymentMethod,
        transaction_id: UUID,
        processed_at: datetime,
        status: PaymentStatus,
        gateway_response: str,
        method_details: PaymentMethodDetails | None,
        status_history: list[PaymentStatusChange],
    ) -> Result["PaymentRecord"]:
        errors = []
        if payment_method == PaymentMethod.CREDIT_CARD and not isinstance(method_details, CreditCardMethodDetails):
            errors.append(
                Error.validation("Credit card details are required", "ERR_METHOD_DETAILS", "paymentMethodDetails")
            )
        if payment_method == PaymentMethod.PAYPAL and not isinstance(method_details, PayPalMethodDetails):
            errors.append(Error.validation("PayPal details are required", "ERR_METHOD_DETAILS", "paymentMethodDetails"))
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=payment_id,
                order_id=order_id,
                amount=amount,
                payment_method=payment_method,
                transaction_id=transaction_id,
                processed_at=processed_at,
                status=status,
                gateway_response=gateway_response,
                method_details=method_details,
                status_history=sorted(status_history, key=lambda change: change.occurred_at),
                created_at=processed_at,
                updated_at=processed_at,
            )
        )

    @property
    def last_status_change(self) -> PaymentStatusChange | None:
        return self.status_history[-1] if self.status_history else None

    def get_credit_card_details(self) -> CreditCardMethodDetails | None:
        if self.payment_method != PaymentMethod.CREDIT_CARD:
            raise ValueError("This payment was not made with a credit card")
        return self.method_details if isinstance(self.method_details, CreditCardMethodDetails) else None

    def get_paypal_details(self) -> PayPalMethodDetails | None:
        if self.payment_method != PaymentMethod.PAYPAL:
            raise ValueError("This payment was not made with PayPal")
        return self.method_details if isinstance(self.method_details, PayPalMethodDetails) else None

    def _transition(self, target: PaymentStatus, reference: str | None) -> Result[PaymentStatusChange]:
        if not self.status.can_transition_to(target):
            return fail(PaymentErrors.status_transition(self.status.value, target.value))
        change = PaymentStatusChange(status=target, reference=reference)
        self.status = target
        self.status_history.append(change)
        self.touch()
        return Ok(change)

    def mark_as_succeeded(self, gateway_reference: str) -> Result[PaymentStatusChange]:
        return self._transition(PaymentStatus.SUCCEEDED, gateway_reference)

    def mark_as_failed(self, reason: str) -> Result[PaymentStatusChange]:
        return self._transition(PaymentStatus.FAILED, reason)

    def mark_as_cancelled(self, reason: str) -> Result[PaymentStatusChange]:
        return self._transition(PaymentStatus.CANCELLED, reason)

    def request_refund(self, refund_amount: Decimal, reason: str) -> Result[PaymentStatusChange]:
        if self.status != PaymentStatus.SUCCEEDED:
            return fail(Error.failure("Only succeeded payments can be refunded", "ERR_REFUND_NOT_ALLOWED"))
        if refund_amount > self.amount.amount:
            return fail(
                Error.validation(
                    "Refund amount is greater than the payment amount", "ERR_REFUND_AMOUNT", "refundAmount"
                )
            )
        return self._transition(PaymentStatus.REFUND_REQUESTED, reason)

    def confirm_refund(self, gateway_refund_id: str) -> Result[PaymentStatusChange]:
        return self._transition(PaymentStatus.REFUNDED, gateway_refund_id)

    def update_from_gateway(self, gateway_status: str, gateway_reference: str) -> Result[PaymentStatusChange]:
        """Apply a status reported by the gateway, subject to the state machine."""
        status_map = _GATEWAY_STATUS_MAPS.get(self.payment_method, {})
        new_status = status_map.get(gateway_status.lower(), PaymentStatus.UNKNOWN)
        return self._transition(new_status, gateway_reference)
