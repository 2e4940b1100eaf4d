"""External services used by the e-commerce domain."""

from .postal_lookup import ViaCepPostalCodeLookup

__all__ = ["ViaCepPostalCodeLookup"]
