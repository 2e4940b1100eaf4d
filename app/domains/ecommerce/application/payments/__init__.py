"""
Payment gateways and their factory.
"""

from app.domains.ecommerce.application.payments.base import IPaymentMethod
from app.domains.ecommerce.application.payments.credit_card import CreditCardPaymentMethod
from app.domains.ecommerce.application.payments.factory import PaymentMethodFactory
from app.domains.ecommerce.application.payments.paypal import PayPalPaymentMethod
from app.domains.ecommerce.application.payments.pix import PixPaymentMethod

__all__ = [
    "IPaymentMethod",
    "CreditCardPaymentMethod",
    "PayPalPaymentMethod",
    "PixPaymentMethod",
    "PaymentMethodFactory",
]
