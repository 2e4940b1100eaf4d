"""
Postal Code Lookup

Async client for a ViaCEP-style lookup service: `GET {url}` with the zip
code substituted, answering a JSON address or `{"erro": true}`.
"""

import logging
from typing import Any

import httpx

from app.core.domain import IntegrationException
from app.domains.ecommerce.application.ports import IPostalCodeLookup

logger = logging.getLogger(__name__)


class ViaCepPostalCodeLookup(IPostalCodeLookup):
    """
    Postal code lookup over HTTP.

    Unknown zip codes and non-200 answers resolve to None; transport
    failures raise IntegrationException.
    """

    def __init__(
        self,
        url_template: str = "https://viacep.com.br/ws/{zip_code}/json/",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the lookup client.

        Args:
            url_template: URL with a `{zip_code}` placeholder
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.url_template = url_template
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def lookup(self, zip_code: str) -> dict[str, Any] | None:
        client = await self._get_client()
        url = self.url_template.format(zip_code=zip_code)
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Postal lookup failed for {zip_code}: {e}")
            raise IntegrationException("postal_lookup", f"Postal lookup failed for {zip_code}", e) from e

        if response.status_code != 200:
            logger.warning(f"Postal lookup for {zip_code} answered HTTP {response.status_code}")
            return None

        payload = response.json()
        if not isinstance(payload, dict) or payload.get("erro"):
            return None
        return payload
