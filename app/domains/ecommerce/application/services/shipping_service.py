"""
Shipping Service

Flat-rate PAC shipping estimates keyed by the destination state, resolved
from the zip code through a postal lookup.
"""

import logging
from decimal import Decimal

from app.core.domain import Money, Ok, Result, fail
from app.domains.ecommerce.application.dto import ShippingEstimate
from app.domains.ecommerce.application.ports import IPostalCodeLookup
from app.domains.ecommerce.domain.errors import ShippingErrors

logger = logging.getLogger(__name__)

_SOUTHEAST_RATE = Decimal("10.00")
_DEFAULT_RATE = Decimal("14.00")
_RATES_BY_STATE = {
    "SP": _SOUTHEAST_RATE,
    "RJ": _SOUTHEAST_RATE,
    "MG": _SOUTHEAST_RATE,
    "ES": Decimal("13.00"),
}

DELIVERY_DAYS_BY_STATE = {
    "SP": 5, "RJ": 7, "MG": 6, "ES": 7, "BA": 8, "PR": 9, "SC": 10,
    "RS": 11, "AM": 12, "PA": 13, "TO": 14, "RO": 15, "AC": 16, "AP": 17,
    "RR": 18, "MA": 19, "PI": 20, "CE": 21, "RN": 22, "PB": 23, "PE": 24,
    "AL": 25, "SE": 26, "MT": 27, "MS": 28, "GO": 29, "DF": 30,
}  # fmt: skip


def normalize_zip_code(zip_code: str) -> str | None:
    """Eight digits, or None when the input cannot be a CEP."""
    digits = zip_code.replace("-", "").replace(".", "").strip()
    if len(digits) != 8 or not digits.isdigit():
        return None
    return digits


class ShippingService:
    def __init__(self, lookup: IPostalCodeLookup, currency_code: str = "BRL"):
        self._lookup = lookup
        self._currency_code = currency_code

    async def estimate_shipping(self, zip_code: str) -> Result[ShippingEstimate]:
        normalized = normalize_zip_code(zip_code)
        if normalized is None:
            return fail(ShippingErrors.invalid_zip_code(zip_code))

        address = await self._lookup.lookup(normalized)
        if not address:
            return fail(ShippingErrors.invalid_zip_code(zip_code))

        state = str(address.get("uf", "")).upper()
        delivery_days = DELIVERY_DAYS_BY_STATE.get(state)
        if delivery_days is None:
            logger.warning(f"No delivery estimate for state {state!r} (zip {normalized})")
            return fail(ShippingErrors.invalid_zip_code(zip_code))

        return Ok(
            ShippingEstimate(
                zip_code=normalized,
                state=state,
                city=str(address.get("localidade", "")),
                cost=Money(self._currency_code, _RATES_BY_STATE.get(state, _DEFAULT_RATE)),
                delivery_days=delivery_days,
            )
        )
