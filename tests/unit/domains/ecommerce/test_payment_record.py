"""
Unit Tests for the PaymentRecord state machine and payment value objects
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.domain import Money
from app.domains.ecommerce.domain.entities import PaymentRecord
from app.domains.ecommerce.domain.value_objects import (
    CreditCardMethodDetails,
    PaymentMethod,
    PaymentStatus,
    card_brand,
)
from tests.utils import assert_err, assert_ok


def _card_payment(amount: str = "100.00") -> PaymentRecord:
    return PaymentRecord.create_credit_card_payment(
        order_id=uuid4(),
        amount=Money.of("BRL", amount),
        transaction_id=uuid4(),
        last_four_digits="1111",
        card_brand="Visa",
        gateway_response="approved",
    )


class TestPaymentStateMachine:
    def test_new_payment_starts_processing_with_history(self):
        payment = _card_payment()

        assert payment.status == PaymentStatus.PROCESSING
        assert [c.status for c in payment.status_history] == [PaymentStatus.PROCESSING]

    def test_full_refund_cycle_appends_history(self):
        # Arrange
        payment = _card_payment()

        # Act
        assert_ok(payment.mark_as_succeeded("ORD-20261019-ABC123"))
        assert_ok(payment.request_refund(Decimal("100.00"), "customer request"))
        assert_ok(payment.confirm_refund("RFD-1"))

        # Assert
        assert payment.status == PaymentStatus.REFUNDED
        assert [c.status for c in payment.status_history] == [
            PaymentStatus.PROCESSING,
            PaymentStatus.SUCCEEDED,
            PaymentStatus.REFUND_REQUESTED,
            PaymentStatus.REFUNDED,
        ]
        assert payment.last_status_change.reference == "RFD-1"

    def test_succeeded_after_refunded_is_rejected(self):
        payment = _card_payment()
        payment.mark_as_succeeded("ref")
        payment.request_refund(Decimal("10"), "partial")
        payment.confirm_refund("RFD-1")

        result = payment.mark_as_succeeded("ref-again")

        assert_err(result, "ERR_STATUS_TRANSITION")
        assert payment.status == PaymentStatus.REFUNDED
        assert len(payment.status_history) == 4

    def test_refund_requires_success_and_amount_within_payment(self):
        payment = _card_payment("50.00")

        assert_err(payment.request_refund(Decimal("1"), "early"), "ERR_REFUND_NOT_ALLOWED")
        payment.mark_as_succeeded("ref")
        assert_err(payment.request_refund(Decimal("50.01"), "too much"), "ERR_REFUND_AMOUNT")

    def test_cancel_from_succeeded(self):
        payment = _card_payment()
        payment.mark_as_succeeded("ref")

        assert_ok(payment.mark_as_cancelled("customer"))
        assert payment.status.is_terminal()

    @pytest.mark.parametrize(
        "gateway_status, expected",
        [("approved", PaymentStatus.SUCCEEDED), ("DECLINED", PaymentStatus.FAILED)],
    )
    def test_update_from_gateway_maps_card_statuses(self, gateway_status, expected):
        payment = _card_payment()

        assert_ok(payment.update_from_gateway(gateway_status, "gw-1"))
        assert payment.status == expected

    def test_update_from_gateway_unknown_status(self):
        payment = PaymentRecord.create_paypal_payment(
            uuid4(), Money.of("BRL", "10"), uuid4(), "payer@ecomify.test", "PAYER1", "completed"
        )

        # "approved" is a card status; PayPal maps it to Unknown, which no state reaches
        assert_err(payment.update_from_gateway("approved", "gw-1"), "ERR_STATUS_TRANSITION")

    def test_method_details_accessors(self):
        payment = _card_payment()

        assert payment.get_credit_card_details().last_four_digits == "1111"
        with pytest.raises(ValueError):
            payment.get_paypal_details()

    def test_rehydration_requires_card_details(self):
        result = PaymentRecord.from_(
            uuid4(), uuid4(), Money.of("BRL", "10"), PaymentMethod.CREDIT_CARD, uuid4(),
            _card_payment().processed_at, PaymentStatus.SUCCEEDED, "approved", None, [],
        )  # fmt: skip

        assert_err(result, "ERR_METHOD_DETAILS")

    def test_fully_discounted_payment_is_rehydrated(self):
        # Arrange
        created = _card_payment("0.00")

        # Act
        result = PaymentRecord.from_(
            created.id, created.order_id, created.amount, created.payment_method, created.transaction_id,
            created.processed_at, created.status, created.gateway_response, created.method_details,
            created.status_history,
        )  # fmt: skip

        # Assert
        assert_ok(result)
        assert result.value.amount == Money.zero("BRL")


class TestPaymentValueObjects:
    @pytest.mark.parametrize(
        "number, brand",
        [("4111111111111111", "Visa"), ("5500 0000 0000 0004", "MasterCard"), ("378282246310005", "American Express"), ("6011000990139424", "Unknown")],
    )  # fmt: skip
    def test_card_brand(self, number, brand):
        assert card_brand(number) == brand

    def test_card_details_keep_last_four_digits_only(self):
        details = CreditCardMethodDetails.from_card_number("4111 1111 1111 1234")

        assert details.last_four_digits == "1234"
        assert details.card_brand == "Visa"

    def test_card_details_validation(self):
        with pytest.raises(ValueError):
            CreditCardMethodDetails(last_four_digits="12a4", card_brand="Visa")
