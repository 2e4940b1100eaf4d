"""
Payment Method Factory

Resolves the gateway registered for a payment method.
"""

from collections.abc import Iterable

from app.core.domain import ConfigurationException
from app.domains.ecommerce.domain.services import OrderIdGenerator
from app.domains.ecommerce.domain.value_objects import PaymentMethod

from .base import IPaymentMethod
from .credit_card import CreditCardPaymentMethod
from .paypal import PayPalPaymentMethod
from .pix import PixPaymentMethod


class PaymentMethodFactory:
    """
    Registry of gateways keyed by payment method.

    An unregistered method is a wiring mistake, not a customer error, so
    it raises ConfigurationException.
    """

    def __init__(self, methods: Iterable[IPaymentMethod]):
        self._methods: dict[PaymentMethod, IPaymentMethod] = {}
        for method in methods:
            if method.method in self._methods:
                raise ConfigurationException("PaymentMethodFactory", f"Duplicated payment method: {method.method}")
            self._methods[method.method] = method

    @classmethod
    def default(
        cls,
        order_ids: OrderIdGenerator,
        credit_card_delay: float = 3.0,
        paypal_delay: float = 0.1,
    ) -> "PaymentMethodFactory":
        return cls(
            [
                CreditCardPaymentMethod(order_ids, credit_card_delay),
                PayPalPaymentMethod(order_ids, paypal_delay),
                PixPaymentMethod(order_ids),
            ]
        )

    @property
    def supported_methods(self) -> list[PaymentMethod]:
        return list(self._methods)

    def get(self, method: PaymentMethod) -> IPaymentMethod:
        try:
            return self._methods[method]
        except KeyError:
            raise ConfigurationException("PaymentMethodFactory", f"No gateway registered for {method!r}") from None
