"""
S5 ORM - entry point.

ActiveRecord-style access to the S5 JSON document store.

    async with S5(api_key="ak_prefix_secret") as s5:
        User = s5.collection("users")
        user = await User.create({"name": "Alice", "status": "active"})
        active = await User.where(q=['eq(status,"active")'], order=["-name"])
"""

import logging

import httpx

from s5.core.client import S5Client
from s5.modules.documents.collection import create_collection
from s5.modules.documents.models import Document

logger = logging.getLogger(__name__)


class S5:
    """Account-level handle that hands out collection-bound Document classes."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.transport = transport
        self._collections: dict[str, type[Document]] = {}

    def collection(self, name: str) -> type[Document]:
        """
        Get a Document class bound to the named collection.

        Repeated calls with the same name return the same class and share
        its connection.

        Raises:
            ConfigurationError: no API key is configured or ``name`` is empty.
        """
        if name in self._collections:
            return self._collections[name]

        client = S5Client(
            base_url=self.base_url,
            api_key=self.api_key,
            collection=name,
            transport=self.transport,
        )
        logger.debug(f"Bound collection '{name}' at {client.base_url}")
        self._collections[name] = create_collection(name, client)
        return self._collections[name]

    async def aclose(self) -> None:
        """Close the connections of every collection handed out."""
        for document_cls in self._collections.values():
            await document_cls.client.aclose()
        self._collections.clear()

    async def __aenter__(self) -> "S5":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
