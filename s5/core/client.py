"""
HTTP connection to the S5 document API.

Wraps an httpx.AsyncClient that is bound to one collection and authenticated
with the account's API key.
"""

import logging

import httpx

from s5.core.config import get_settings
from s5.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class S5Client:
    """Authenticated request issuer for a single collection."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        collection: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.S5_BASE_URL
        self.api_key = api_key or settings.S5_API_KEY
        self.collection = collection

        if not self.api_key:
            raise ConfigurationError("API key is required")

        if not self.collection:
            raise ConfigurationError("Collection name is required")

        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @property
    def path(self) -> str:
        """URL path of the bound collection."""
        return f"/{self.collection}"

    def record_path(self, record_id: str) -> str:
        """URL path of a single record in the bound collection."""
        return f"{self.path}/{record_id}"

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Issue one request and fail on any non-2xx status.

        Raises:
            httpx.HTTPError: transport failure or error status.
        """
        logger.debug(f"{method} {url}")
        response = await self.http.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.http.aclose()

    async def __aenter__(self) -> "S5Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"S5Client(base_url={self.base_url!r}, collection={self.collection!r})"
