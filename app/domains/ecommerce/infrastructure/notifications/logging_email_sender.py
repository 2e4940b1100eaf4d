"""
Logging Email Sender

IEmailSender that only logs the notification. Stands in for a mail
provider in development and tests.
"""

from uuid import UUID

from app.core.shared.logger import get_logger
from app.domains.ecommerce.application.ports import IEmailSender

logger = get_logger(__name__, {"component": "email_sender"})


class LoggingEmailSender(IEmailSender):
    def __init__(self, tracking_base_url: str = ""):
        self._tracking_base_url = tracking_base_url.rstrip("/")

    async def send_order_confirmation(self, user_id: str, order_id: UUID, reference: str, amount: str) -> None:
        logger.info(
            "Order confirmation email",
            user_id=user_id,
            order_id=str(order_id),
            reference=reference,
            amount=amount,
            tracking_url=self._tracking_url(order_id),
        )

    async def send_payment_cancellation(self, user_id: str, order_id: UUID, transaction_id: UUID) -> None:
        logger.info(
            "Payment cancellation email",
            user_id=user_id,
            order_id=str(order_id),
            transaction_id=str(transaction_id),
        )

    async def send_payment_refund(self, user_id: str, order_id: UUID, transaction_id: UUID, amount: str) -> None:
        logger.info(
            "Payment refund email",
            user_id=user_id,
            order_id=str(order_id),
            transaction_id=str(transaction_id),
            amount=amount,
        )

    def _tracking_url(self, order_id: UUID) -> str | None:
        if not self._tracking_base_url:
            return None
        return f"{self._tracking_base_url}/{order_id}"
