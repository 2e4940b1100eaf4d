"""
Payment Input Validation

Field checks run by the payment strategies before calling a gateway.
Each function returns the list of validation errors (empty when valid).
"""

import re
from datetime import date

from app.core.domain import Error, ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CVV_RE = re.compile(r"^\d{3,4}$")


def is_valid_card_number(card_number: str | None) -> bool:
    """Luhn checksum over a string of digits (spaces and dashes ignored)."""
    if not card_number:
        return False
    digits = card_number.replace(" ", "").replace("-", "")
    if not digits.isdigit() or len(digits) < 12:
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_expiration_date(expiration_date: str | None, today: date | None = None) -> bool:
    """MM/YY, month 1-12, card still valid during the given month."""
    if not expiration_date:
        return False
    parts = expiration_date.strip().split("/")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return False
    month, year = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        return False
    if year < 100:
        year += 2000
    today = today or date.today()
    return (year, month) >= (today.year, today.month)


def validate_credit_card(
    card_number: str | None,
    expiration_date: str | None,
    cvv: str | None,
    today: date | None = None,
) -> list[ValidationError]:
    errors: list[ValidationError] = []

    if not card_number or not card_number.strip():
        errors.append(Error.validation("Card number is required", "ERR_CARD_NUMBER_REQUIRED", "CardNumber"))
    elif not is_valid_card_number(card_number):
        errors.append(Error.validation("Invalid card number", "ERR_INVALID_CARD_NUMBER", "CardNumber"))

    if not expiration_date or not expiration_date.strip():
        errors.append(Error.validation("Expiration date is required", "ERR_EXP_DATE_REQUIRED", "ExpirationDate"))
    elif not is_valid_expiration_date(expiration_date, today):
        errors.append(Error.validation("Invalid expiration date", "ERR_INVALID_EXP_DATE", "ExpirationDate"))

    if not cvv or not cvv.strip():
        errors.append(Error.validation("CVV is required", "ERR_CVV_REQUIRED", "CVV"))
    elif not _CVV_RE.match(cvv.strip()):
        errors.append(Error.validation("Invalid CVV", "ERR_INVALID_CVV", "CVV"))

    return errors


def validate_paypal(payer_email: str | None, payer_id: str | None) -> list[ValidationError]:
    errors: list[ValidationError] = []

    if not payer_email or not payer_email.strip():
        errors.append(Error.validation("Payer email is required", "ERR_PAYER_EMAIL_REQUIRED", "PayerEmail"))
    elif not _EMAIL_RE.match(payer_email.strip()):
        errors.append(Error.validation("Invalid payer email", "ERR_INVALID_PAYER_EMAIL", "PayerEmail"))

    if not payer_id or not payer_id.strip():
        errors.append(Error.validation("Payer id is required", "ERR_PAYER_ID_REQUIRED", "PayerId"))

    return errors
