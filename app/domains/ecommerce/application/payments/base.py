"""
Payment Method Capability

Every gateway variant exposes the same capability and is registered in
the factory under the payment method it handles.
"""

from typing import Protocol, runtime_checkable
from uuid import uuid4

from app.core.domain import Error, Result
from app.domains.ecommerce.application.dto import PaymentDetails
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.domain.value_objects import GatewayResponse, PaymentMethod


@runtime_checkable
class IPaymentMethod(Protocol):
    """Gateway capability for one payment method."""

    method: PaymentMethod

    async def process_payment(self, details: PaymentDetails | None) -> Result[GatewayResponse]:
        """Charge the customer and return the gateway response"""
        ...


def approved_response(order_ids: OrderIdGenerator) -> GatewayResponse:
    return GatewayResponse(transaction_id=uuid4(), reference=order_ids.generate(), is_success=True)


def invalid_details_error(method: PaymentMethod) -> Error:
    return Error.validation(f"Invalid payment details for {method.description}", "ERR_PAYMENT_DETAILS", "details")
