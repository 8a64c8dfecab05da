"""Document model - ActiveRecord-style access to records in an S5 collection."""

import copy
import logging
from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from s5.core.client import S5Client
from s5.core.exceptions import ConfigurationError, NotPersistedError
from s5.modules.documents import services
from s5.modules.documents.schemas import QueryOptions, Record

logger = logging.getLogger(__name__)


def _list_index(container: Any, key: str) -> int | None:
    """Position addressed by a numeric path segment, if it exists in a list."""
    if isinstance(container, list) and key.isdigit() and int(key) < len(container):
        return int(key)
    return None


class Document:
    """
    One record of a collection.

    Class-level methods query the collection and instance methods persist a
    single record. Every method that talks to the server issues exactly one
    request. Use ``create_collection`` (or ``S5.collection``) to obtain a
    subclass bound to a collection before calling them.

        User = s5.collection("users")
        user = await User.create({"name": "Alice", "settings": {"theme": "dark"}})
        user.set("settings.theme", "light")
        await user.save()
    """

    client: ClassVar[S5Client | None] = None
    collection_name: ClassVar[str | None] = None

    def __init__(
        self,
        data: dict[str, Any] | None = None,
        *,
        id: str | None = None,
        collection: str | None = None,
        version: int | str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        ttl_at: datetime | str | None = None,
    ):
        self.data: dict[str, Any] = copy.deepcopy(data) if data else {}
        self.id = id
        self.collection = collection
        self.version = version
        self.created_at = created_at
        self.updated_at = updated_at
        self.ttl_at = ttl_at

    @classmethod
    def from_record(cls, record: Record | dict) -> "Document":
        """Create instance from a server record."""
        if not isinstance(record, Record):
            record = Record.model_validate(record)
        return cls(
            record.data,
            id=record.id,
            collection=record.collection,
            version=record.version,
            created_at=record.created_at,
            updated_at=record.updated_at,
            ttl_at=record.ttl_at,
        )

    @classmethod
    def bound_client(cls) -> S5Client:
        if cls.client is None:
            raise ConfigurationError(
                f"{cls.__name__} is not bound to a collection; use create_collection()"
            )
        return cls.client

    # Collection queries

    @classmethod
    async def all(cls) -> "QueryResult":
        """Every document of the collection (first page as served)."""
        return await cls.where()

    @classmethod
    async def where(cls, **options: Any) -> "QueryResult":
        """
        Query the collection.

        Options:
            q: predicate string or list of predicates, combined with AND.
            order: field name or list of names; prefix ``-`` for descending.
            filter: mapping of operator to ``{field: value}``.
            limit, page: pagination.

        Raises:
            QueryError: the request failed.
        """
        page = await services.list_records(cls.bound_client(), QueryOptions(**options))
        return QueryResult(
            documents=[cls.from_record(record) for record in page.data],
            pagination=page.pagination,
        )

    @classmethod
    async def find(cls, id: str) -> "Document | None":
        """Fetch a document by ID; None when it does not exist."""
        record = await services.get_record(cls.bound_client(), id)
        return cls.from_record(record) if record else None

    @classmethod
    async def first(cls, **options: Any) -> "Document | None":
        """First document matching the options, or None."""
        result = await cls.where(**{**options, "limit": 1})
        return result.documents[0] if result.documents else None

    @classmethod
    async def count(cls, **options: Any) -> int:
        """
        Number of documents on a single-item page.

        There is no count endpoint, so this queries with ``limit=1`` and can
        only return 0 or 1.
        """
        result = await cls.where(**{**options, "limit": 1})
        return len(result.documents)

    @classmethod
    async def create(cls, data: dict[str, Any], **options: Any) -> "Document":
        """Create a document; options (e.g. ``ttl_at``) are sent alongside data."""
        payload = services.build_payload(data, **options)
        record = await services.insert_record(cls.bound_client(), payload)
        return cls.from_record(record)

    # Instance persistence

    @property
    def persisted(self) -> bool:
        return bool(self.id)

    def _require_id(self, action: str) -> str:
        if not self.id:
            raise NotPersistedError(f"Cannot {action} document without ID")
        return self.id

    def _assign(self, record: Record) -> None:
        """Replace every local field with the server's copy."""
        self.data = record.data
        self.id = record.id
        self.collection = record.collection
        self.version = record.version
        self.created_at = record.created_at
        self.updated_at = record.updated_at
        self.ttl_at = record.ttl_at

    async def save(self) -> "Document":
        """Create the document if it has no ID, update it otherwise."""
        if self.id:
            return await self.update()
        return await self._create()

    async def _create(self) -> "Document":
        payload = services.build_payload(self.data, ttl_at=self.ttl_at)
        record = await services.insert_record(self.bound_client(), payload)
        self._assign(record)
        return self

    async def update(self, data: dict[str, Any] | None = None) -> "Document":
        """Replace the stored data, after merging ``data`` into it when given."""
        record_id = self._require_id("update")
        if data:
            self.data = {**self.data, **data}

        payload = services.build_payload(self.data, ttl_at=self.ttl_at)
        record = await services.replace_record(self.bound_client(), record_id, payload)
        self._assign(record)
        return self

    async def patch(self, data: dict[str, Any]) -> "Document":
        """Merge ``data`` into the stored document server-side."""
        record_id = self._require_id("patch")
        record = await services.merge_record(self.bound_client(), record_id, data)
        self._assign(record)
        return self

    async def destroy(self) -> bool:
        """Delete the stored document. Local fields are left as they are."""
        record_id = self._require_id("delete")
        return await services.delete_record(self.bound_client(), record_id)

    async def reload(self) -> "Document":
        """Refresh every field from the server; unchanged if it no longer exists."""
        record_id = self._require_id("reload")
        record = await services.get_record(self.bound_client(), record_id)
        if record:
            self._assign(record)
        else:
            logger.debug(f"Document {record_id} not found on reload, keeping local state")
        return self

    # Data access

    def attributes(self) -> dict[str, Any]:
        return self.data

    def get(self, path: str) -> Any:
        """Read a value by dot path, e.g. ``settings.theme``; None if any step is missing."""
        current: Any = self.data
        for key in path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            elif _list_index(current, key) is not None:
                current = current[int(key)]
            else:
                return None
        return current

    def set(self, path: str, value: Any) -> None:
        """
        Write a value by dot path, creating missing intermediate mappings.

        Numeric segments address existing list elements, as in ``get``.
        """
        keys = path.split(".")
        target: Any = self.data
        for depth, key in enumerate(keys):
            is_last = depth == len(keys) - 1
            index = _list_index(target, key)
            if index is not None:
                if is_last:
                    target[index] = value
                else:
                    target = target[index]
                continue
            if not isinstance(target, dict):
                parent = ".".join(keys[:depth])
                raise TypeError(f"Cannot set '{path}': '{parent}' is not a mapping")
            if is_last:
                target[key] = value
            else:
                target = target.setdefault(key, {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "collection": self.collection,
            "data": self.data,
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "ttl_at": self.ttl_at,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} data={self.data!r}>"


class QueryResult(BaseModel):
    """Documents returned by a query, with pagination metadata when served."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    documents: list[Document]
    pagination: dict[str, Any] | None = None
