"""
Unit Tests for PaymentService

The service runs over a mocked unit of work with the real
TransactionHandler, OrderService and gateways.
"""

import random
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import Money, Ok, first_error
from app.database.transaction_handler import TransactionHandler
from app.domains.ecommerce.application.dto import (
    CreditCardPaymentDetails,
    PaymentFilter,
    ProcessPaymentRequest,
)
from app.domains.ecommerce.application.payments import (
    CreditCardPaymentMethod,
    PaymentMethodFactory,
    PixPaymentMethod,
)
from app.domains.ecommerce.application.services import DiscountService, OrderService, PaymentService
from app.domains.ecommerce.domain.entities import PaymentRecord
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentMethod, PaymentStatus
from tests.utils import CartBuilder, OrderBuilder, ProductBuilder, assert_err, assert_field_error, make_address


@pytest.fixture
def email_sender():
    return AsyncMock()


@pytest.fixture
def service(uow, discount_strategies, email_sender):
    order_ids = OrderIdGenerator(random.Random(3))
    payment_methods = PaymentMethodFactory(
        [CreditCardPaymentMethod(order_ids, 0, today=date(2026, 10, 19)), PixPaymentMethod(order_ids)]
    )
    order_service = OrderService(uow, DiscountService(uow), discount_strategies)
    return PaymentService(uow, TransactionHandler(uow), order_service, payment_methods, email_sender)


@pytest.fixture
def checkout(repositories, stored_orders):
    """A cart with two units of a 50.00 product."""
    product = ProductBuilder().with_price("50.00").with_stock(5).build()
    cart = CartBuilder().with_item(product, 2).build()
    repositories.carts.get_by_user.return_value = cart
    repositories.products.get_by_id.side_effect = lambda product_id: product if product_id == product.id else None
    repositories.payments.create.side_effect = lambda payment: payment.id
    return product, cart


def _card_request(card_number: str = "4111111111111111", method=PaymentMethod.CREDIT_CARD):
    return ProcessPaymentRequest(
        user_id="user-1",
        payment_method=method,
        shipping_address=make_address(),
        billing_address=make_address(),
        details=CreditCardPaymentDetails(card_number, "12/28", "123"),
    )


def _paid(order) -> PaymentRecord:
    payment = PaymentRecord.create_pix_payment(order.id, Money.of("BRL", "100.00"), uuid4(), "approved")
    payment.mark_as_succeeded("ORD-20261019-ABC123")
    return payment


class TestProcessPayment:
    @pytest.mark.asyncio
    async def test_card_payment_confirms_order(self, service, uow, repositories, stored_orders, email_sender, checkout):
        # Arrange
        product, cart = checkout

        # Act
        result = await service.process_payment(_card_request())

        # Assert
        payment = result.value
        assert payment.status == PaymentStatus.SUCCEEDED
        assert payment.amount == Money.of("BRL", "100.00")
        assert stored_orders[payment.order_id].status == OrderStatus.CONFIRMED
        assert product.stock == 3
        assert cart.is_empty

        record = repositories.payments.create.await_args.args[0]
        assert record.get_credit_card_details().last_four_digits == "1111"
        assert repositories.payments.create_status_history.await_count == 2
        uow.commit.assert_any_await(allow_external_commit=True)
        uow.rollback.assert_not_awaited()
        email_sender.send_order_confirmation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejected_card_creates_nothing(self, service, uow, repositories, email_sender, checkout):
        product, _ = checkout

        result = await service.process_payment(_card_request("1234567890123456"))

        assert_field_error(result, "CardNumber", "ERR_INVALID_CARD_NUMBER")
        assert_err(result, "ERR_PAYMENT_FAILED")
        assert product.stock == 5
        repositories.orders.create_order.assert_not_awaited()
        uow.rollback.assert_awaited_once()
        email_sender.send_order_confirmation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_details_must_match_method(self, service, repositories, checkout):
        result = await service.process_payment(_card_request(method=PaymentMethod.PIX))

        assert_err(result, "ERR_PAYMENT_METHOD")
        repositories.orders.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_failure(self, service, uow, repositories, checkout):
        repositories.orders.create_order.side_effect = RuntimeError("deadlock detected")

        result = await service.process_payment(_card_request())

        assert_err(result, "ERR_FAILURE")
        assert "deadlock detected" in first_error(result).description
        uow.rollback.assert_awaited()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notification_failure_is_ignored(self, service, email_sender, checkout):
        email_sender.send_order_confirmation.side_effect = RuntimeError("smtp down")

        result = await service.process_payment(_card_request())

        assert isinstance(result, Ok)


class TestCancelAndRefund:
    @pytest.mark.asyncio
    async def test_cancel_confirmed_order(self, service, repositories, stored_orders, email_sender):
        # Arrange
        order = OrderBuilder().with_status(OrderStatus.CONFIRMED).build()
        stored_orders[order.id] = order
        payment = _paid(order)
        repositories.payments.get_by_transaction_id.return_value = payment

        # Act
        result = await service.cancel_payment(payment.transaction_id)

        # Assert
        assert result.value.status == PaymentStatus.CANCELLED
        assert order.status == OrderStatus.CANCELLED
        email_sender.send_payment_cancellation.assert_awaited_once_with(order.user_id, order.id, payment.transaction_id)

    @pytest.mark.asyncio
    async def test_cancel_shipped_order_is_rejected(self, service, uow, repositories, stored_orders):
        order = OrderBuilder().with_status(OrderStatus.SHIPPED).build()
        stored_orders[order.id] = order
        payment = _paid(order)
        repositories.payments.get_by_transaction_id.return_value = payment

        result = await service.cancel_payment(payment.transaction_id)

        assert_err(result, "ERR_ORDER_ALREADY_PROCESSED")
        assert payment.status == PaymentStatus.SUCCEEDED
        uow.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refund(self, service, repositories, stored_orders):
        order = OrderBuilder().with_status(OrderStatus.CONFIRMED).build()
        stored_orders[order.id] = order
        payment = _paid(order)
        repositories.payments.get_by_transaction_id.return_value = payment

        result = await service.refund_payment(payment.transaction_id)

        assert result.value.status == PaymentStatus.REFUNDED
        assert order.status == OrderStatus.REFUNDED
        assert payment.last_status_change.reference.startswith("RFD-")
        assert repositories.payments.create_status_history.await_count == 2

    @pytest.mark.asyncio
    async def test_refund_twice(self, service, repositories, stored_orders):
        order = OrderBuilder().with_status(OrderStatus.CONFIRMED).build()
        stored_orders[order.id] = order
        payment = _paid(order)
        repositories.payments.get_by_transaction_id.return_value = payment
        await service.refund_payment(payment.transaction_id)

        result = await service.refund_payment(payment.transaction_id)

        assert_err(result, "ERR_PAYMENT_ALREADY_PROCESSED")

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, service):
        assert_err(await service.cancel_payment(uuid4()), "ERR_PAYMENT_NOT_FOUND")
        assert_err(await service.refund_payment(uuid4()), "ERR_PAYMENT_NOT_FOUND")


class TestPaymentQueries:
    @pytest.mark.asyncio
    async def test_get_payments_pages(self, service, repositories):
        payment = _paid(OrderBuilder().build())
        repositories.payments.filter.return_value = ([payment], 41)

        page = (await service.get_payments(PaymentFilter(status=PaymentStatus.SUCCEEDED, page=2))).value

        assert page.items == [payment]
        assert page.total_pages == 3
        assert page.has_next
        repositories.payments.filter.assert_awaited_once_with(
            status=PaymentStatus.SUCCEEDED, payment_method=None, page=2, page_size=20
        )

    @pytest.mark.asyncio
    async def test_get_by_transaction_id(self, service, repositories):
        payment = _paid(OrderBuilder().build())
        repositories.payments.get_by_transaction_id.return_value = payment

        assert (await service.get_by_transaction_id(payment.transaction_id)).value is payment
        assert payment.amount.amount == Decimal("100.00")
