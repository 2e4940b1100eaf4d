"""
PayPal Gateway

Hands the charge to the external payer account.
"""

import asyncio
import logging

from app.core.domain import Ok, Result, fail
from app.domains.ecommerce.application.dto import PaymentDetails, PayPalPaymentDetails
from app.domains.ecommerce.domain.services import OrderIdGenerator, validate_paypal
from app.domains.ecommerce.domain.value_objects import GatewayResponse, PaymentMethod

from .base import approved_response, invalid_details_error

logger = logging.getLogger(__name__)


class PayPalPaymentMethod:
    """PayPal gateway."""

    method = PaymentMethod.PAYPAL

    def __init__(self, order_ids: OrderIdGenerator, processing_delay: float = 0.1):
        self._order_ids = order_ids
        self._processing_delay = processing_delay

    async def process_payment(self, details: PaymentDetails | None) -> Result[GatewayResponse]:
        if not isinstance(details, PayPalPaymentDetails):
            return fail(invalid_details_error(self.method))

        errors = validate_paypal(details.payer_email, details.payer_id)
        if errors:
            return fail(errors)

        await asyncio.sleep(self._processing_delay)

        response = approved_response(self._order_ids)
        logger.info(f"PayPal charge approved: {response.transaction_id}")
        return Ok(response)
