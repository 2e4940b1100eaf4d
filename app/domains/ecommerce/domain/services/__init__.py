"""
E-commerce Domain Services

Domain logic that doesn't belong to a single entity.
"""

from app.domains.ecommerce.domain.services.order_id_generator import OrderIdGenerator
from app.domains.ecommerce.domain.services.payment_validation import (
    is_valid_card_number,
    is_valid_expiration_date,
    validate_credit_card,
    validate_paypal,
)

__all__ = [
    "OrderIdGenerator",
    "is_valid_card_number",
    "is_valid_expiration_date",
    "validate_credit_card",
    "validate_paypal",
]
