"""
Pix Gateway

Instant transfer: approved immediately, no payer details needed.
"""

from app.core.domain import Ok, Result
from app.domains.ecommerce.application.dto import PaymentDetails
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.domain.value_objects import GatewayResponse, PaymentMethod

from .base import approved_response


class PixPaymentMethod:
    """Pix gateway."""

    method = PaymentMethod.PIX

    def __init__(self, order_ids: OrderIdGenerator):
        self._order_ids = order_ids

    async def process_payment(self, details: PaymentDetails | None) -> Result[GatewayResponse]:
        return Ok(approved_response(self._order_ids))
