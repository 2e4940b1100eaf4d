"""
Credit Card Gateway

Validates the card locally, then simulates the network round trip to
the card processor.
"""

import asyncio
import logging
from datetime import date

from app.core.domain import Ok, Result, fail
from app.domains.ecommerce.application.dto import CreditCardPaymentDetails, PaymentDetails
from app.domains.ecommerce.domain.services import OrderIdGenerator, validate_credit_card
from app.domains.ecommerce.domain.value_objects import GatewayResponse, PaymentMethod

from .base import approved_response, invalid_details_error

logger = logging.getLogger(__name__)


class CreditCardPaymentMethod:
    """Credit card gateway."""

    method = PaymentMethod.CREDIT_CARD

    def __init__(self, order_ids: OrderIdGenerator, processing_delay: float = 3.0, today: date | None = None):
        self._order_ids = order_ids
        self._processing_delay = processing_delay
        self._today = today

    async def process_payment(self, details: PaymentDetails | None) -> Result[GatewayResponse]:
        if not isinstance(details, CreditCardPaymentDetails):
            return fail(invalid_details_error(self.method))

        errors = validate_credit_card(details.card_number, details.expiration_date, details.cvv, self._today)
        if errors:
            logger.info(f"Credit card rejected: {[e.code for e in errors]}")
            return fail(errors)

        await asyncio.sleep(self._processing_delay)

        response = approved_response(self._order_ids)
        logger.info(f"Credit card charge approved: {response.transaction_id}")
        return Ok(response)
