"""
Payment Service

Checkout ("pay for cart"), payment queries, cancellation and refund.

Every command runs inside a TransactionHandler: the inner services keep
calling commit, which is deferred until the command's Result is known.
Unlike the other services, an exception raised inside a payment command
does not escape: after the rollback it is turned into a Failure result.
Cancellation still propagates.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import UUID, uuid4

from app.core.domain import Err, Ok, Result, errors_of, fail
from app.core.interfaces import ITransactionHandler, IUnitOfWork
from app.core.shared.logger import ContextLogger, get_service_logger
from app.domains.ecommerce.application.dto import (
    CreateOrderRequest,
    CreditCardPaymentDetails,
    PageResult,
    PaymentFilter,
    PaymentResult,
    PayPalPaymentDetails,
    ProcessPaymentRequest,
)
from app.domains.ecommerce.application.payments import PaymentMethodFactory
from app.domains.ecommerce.application.ports import (
    ICartRepository,
    IEmailSender,
    IOrderRepository,
    IPaymentRepository,
)
from app.domains.ecommerce.domain.entities import Order, PaymentRecord
from app.domains.ecommerce.domain.errors import CartErrors, CommonErrors, OrderErrors, PaymentErrors
from app.domains.ecommerce.domain.value_objects import (
    GatewayResponse,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    card_brand,
)

from .order_service import OrderService

logger = get_service_logger("payment")

T = TypeVar("T")

# Details payload each method must be called with
_DETAILS_BY_METHOD: dict[PaymentMethod, type] = {
    PaymentMethod.CREDIT_CARD: CreditCardPaymentDetails,
    PaymentMethod.PAYPAL: PayPalPaymentDetails,
    PaymentMethod.PIX: type(None),
}

_LOCKED_ORDER_STATUSES = (OrderStatus.SHIPPED, OrderStatus.COMPLETED)


class PaymentService:
    """
    Payment use cases over one unit of work.

    Example:
        ```python
        result = await service.process_payment(
            ProcessPaymentRequest(
                user_id="user-1",
                payment_method=PaymentMethod.PIX,
                shipping_address=address,
                billing_address=address,
            )
        )
        ```
    """

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        transaction_handler: ITransactionHandler,
        order_service: OrderService,
        payment_methods: PaymentMethodFactory,
        email_sender: IEmailSender,
        refund_delay: float = 0.0,
    ):
        self._unit_of_work = unit_of_work
        self._transaction_handler = transaction_handler
        self._order_service = order_service
        self._payment_methods = payment_methods
        self._email_sender = email_sender
        self._refund_delay = refund_delay
        self._payments = unit_of_work.get_repository(IPaymentRepository)
        self._orders = unit_of_work.get_repository(IOrderRepository)
        self._carts = unit_of_work.get_repository(ICartRepository)

    # ==================== Queries ====================

    async def get_payments(self, filters: PaymentFilter) -> Result[PageResult[PaymentRecord]]:
        payments, total = await self._payments.filter(
            status=filters.status,
            payment_method=filters.payment_method,
            page=filters.page,
            page_size=filters.page_size,
        )
        return Ok(PageResult(payments, total, filters.page, filters.page_size))

    async def get_by_transaction_id(self, transaction_id: UUID) -> Result[PaymentRecord]:
        payment = await self._payments.get_by_transaction_id(transaction_id)
        if payment is None:
            return fail(PaymentErrors.payment_not_found(transaction_id))
        return Ok(payment)

    async def get_payments_by_customer(self, user_id: str) -> Result[list[PaymentRecord]]:
        return Ok(await self._payments.get_by_customer(user_id))

    # ==================== Commands ====================

    async def process_payment(self, request: ProcessPaymentRequest) -> Result[PaymentResult]:
        """Charge the user's cart, create the order and record the payment."""
        log = logger.with_context(user_id=request.user_id, payment_method=request.payment_method.value)
        result = await self._run(lambda: self._process_payment(request, log), "process_payment", log)

        if isinstance(result, Ok):
            payment = result.value
            log.info("Payment succeeded", order_id=str(payment.order_id), reference=payment.reference)
            await self._notify(
                self._email_sender.send_order_confirmation(
                    request.user_id, payment.order_id, payment.reference, str(payment.amount)
                ),
                log,
            )
        return result

    async def cancel_payment(self, transaction_id: UUID) -> Result[PaymentRecord]:
        log = logger.with_context(transaction_id=str(transaction_id))
        result = await self._run(lambda: self._cancel_payment(transaction_id), "cancel_payment", log)

        if isinstance(result, Ok):
            order = await self._orders.get_by_id(result.value.order_id)
            if order is not None:
                await self._notify(
                    self._email_sender.send_payment_cancellation(order.user_id, order.id, transaction_id),
                    log,
                )
        return result

    async def refund_payment(self, transaction_id: UUID) -> Result[PaymentRecord]:
        log = logger.with_context(transaction_id=str(transaction_id))
        result = await self._run(lambda: self._refund_payment(transaction_id), "refund_payment", log)

        if isinstance(result, Ok):
            payment = result.value
            order = await self._orders.get_by_id(payment.order_id)
            if order is not None:
                await self._notify(
                    self._email_sender.send_payment_refund(
                        order.user_id, order.id, transaction_id, str(payment.amount)
                    ),
                    log,
                )
        return result

    # ==================== Transactional bodies ====================

    async def _process_payment(self, request: ProcessPaymentRequest, log: ContextLogger) -> Result[PaymentResult]:
        cart = await self._carts.get_by_user(request.user_id)
        if cart is None:
            return fail(CartErrors.cart_not_found(request.user_id))
        if cart.is_empty:
            return fail(CartErrors.cart_empty(request.user_id))

        expected = _DETAILS_BY_METHOD.get(request.payment_method)
        if expected is None or not isinstance(request.details, expected):
            return fail(PaymentErrors.invalid_payment_method(request.payment_method.value))

        gateway = self._payment_methods.get(request.payment_method)
        response = await gateway.process_payment(request.details)
        if isinstance(response, Err):
            log.warning("Gateway rejected payment", errors=[e.code for e in errors_of(response)])
            return fail(errors_of(response), PaymentErrors.payment_failed())
        if not response.value.is_success:
            return fail(PaymentErrors.payment_failed())

        order_id = await self._order_service.create_order(
            CreateOrderRequest(
                user_id=request.user_id,
                shipping_address=request.shipping_address,
                billing_address=request.billing_address,
            )
        )
        if isinstance(order_id, Err):
            log.error(
                "Order creation failed after the gateway approved the payment",
                transaction_id=str(response.value.transaction_id),
            )
            return order_id

        paid = await self._order_service.mark_as_paid(order_id.value)
        if isinstance(paid, Err):
            return paid

        payment = self._build_payment_record(request, paid.value, response.value)
        succeeded = payment.mark_as_succeeded(response.value.reference)
        if isinstance(succeeded, Err):
            return succeeded

        payment_id = await self._payments.create(payment)
        for change in payment.status_history:
            await self._payments.create_status_history(payment_id, change)

        await self._unit_of_work.commit()
        return Ok(
            PaymentResult(
                order_id=order_id.value,
                payment_id=payment_id,
                transaction_id=response.value.transaction_id,
                reference=response.value.reference,
                status=payment.status,
                amount=payment.amount,
            )
        )

    async def _cancel_payment(self, transaction_id: UUID) -> Result[PaymentRecord]:
        payment = await self._payments.get_by_transaction_id(transaction_id)
        if payment is None:
            return fail(PaymentErrors.payment_not_found(transaction_id))
        if payment.status in (PaymentStatus.REFUNDED, PaymentStatus.CANCELLED):
            return fail(PaymentErrors.already_processed(payment.id))

        order = await self._orders.get_by_id(payment.order_id)
        if order is None:
            return fail(OrderErrors.order_not_found(payment.order_id))
        if order.status in _LOCKED_ORDER_STATUSES:
            return fail(OrderErrors.already_processed(order.id))

        change = payment.mark_as_cancelled("Cancelled by customer")
        if isinstance(change, Err):
            return change
        cancelled = order.cancel()
        if isinstance(cancelled, Err):
            return cancelled

        await self._payments.update(payment)
        await self._payments.create_status_history(payment.id, change.value)
        await self._orders.update(order)
        await self._unit_of_work.commit()
        return Ok(payment)

    async def _refund_payment(self, transaction_id: UUID) -> Result[PaymentRecord]:
        payment = await self._payments.get_by_transaction_id(transaction_id)
        if payment is None:
            return fail(PaymentErrors.payment_not_found(transaction_id))
        if payment.status in (PaymentStatus.REFUNDED, PaymentStatus.CANCELLED):
            return fail(PaymentErrors.already_processed(payment.id))

        order = await self._orders.get_by_id(payment.order_id)
        if order is None:
            return fail(OrderErrors.order_not_found(payment.order_id))

        requested = payment.request_refund(payment.amount.amount, "Refund requested by customer")
        if isinstance(requested, Err):
            return requested

        # Gateway round trip
        await asyncio.sleep(self._refund_delay)

        confirmed = payment.confirm_refund(f"RFD-{uuid4().hex[:12].upper()}")
        if isinstance(confirmed, Err):
            return confirmed
        refunded = order.refund()
        if isinstance(refunded, Err):
            return refunded

        await self._payments.update(payment)
        await self._payments.create_status_history(payment.id, requested.value)
        await self._payments.create_status_history(payment.id, confirmed.value)
        await self._orders.update(order)
        await self._unit_of_work.commit()
        return Ok(payment)

    # ==================== Helpers ====================

    async def _run(
        self,
        operation: Callable[[], Awaitable[Result[T]]],
        operation_name: str,
        log: ContextLogger,
    ) -> Result[T]:
        try:
            return await self._transaction_handler.execute_in_transaction(operation, operation_name)
        except Exception as e:
            log.error(f"{operation_name} failed: {e}")
            return fail(CommonErrors.failure(str(e)))

    @staticmethod
    def _build_payment_record(
        request: ProcessPaymentRequest,
        order: Order,
        response: GatewayResponse,
    ) -> PaymentRecord:
        amount = order.total_with_discount
        details = request.details
        if isinstance(details, CreditCardPaymentDetails):
            digits = "".join(c for c in details.card_number if c.isdigit())
            return PaymentRecord.create_credit_card_payment(
                order.id, amount, response.transaction_id, digits[-4:], card_brand(digits), "approved"
            )
        if isinstance(details, PayPalPaymentDetails):
            return PaymentRecord.create_paypal_payment(
                order.id, amount, response.transaction_id, details.payer_email, details.payer_id, "completed"
            )
        return PaymentRecord.create_pix_payment(order.id, amount, response.transaction_id, "approved")

    @staticmethod
    async def _notify(notification: Awaitable[None], log: ContextLogger) -> None:
        try:
            await notification
        except Exception as e:
            log.warning(f"Notification failed: {e}")
