"""Document schemas - wire format of records and query options."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """A document record as returned by the S5 API."""

    id: str | None = None
    collection: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    version: int | str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    ttl_at: datetime | None = None

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        json_schema_extra={
            "example": {
                "id": "d6f1c2a0-0000-4000-8000-000000000001",
                "collection": "users",
                "data": {"name": "Alice Johnson", "settings": {"theme": "dark"}},
                "version": 1,
                "created_at": "2024-05-20T10:00:00Z",
                "updated_at": "2024-05-20T10:00:00Z",
                "ttl_at": None,
            }
        },
    )


class RecordPage(BaseModel):
    """Payload of a list response: one page of records."""

    data: list[Record]
    pagination: dict[str, Any] | None = None


class QueryOptions(BaseModel):
    """Filtering, ordering and pagination options for a collection query."""

    model_config = ConfigDict(extra="forbid")

    q: list[str] = Field(default_factory=list)
    order: list[str] = Field(default_factory=list)
    filter: dict[str, Any] | None = None
    limit: int | None = None
    page: int | None = None

    @field_validator("q", "order", mode="before")
    @classmethod
    def parse_terms(cls, v: str | list[str] | None) -> list[str]:
        """Accept a single term in place of a list."""
        if not v:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def to_params(self) -> list[tuple[str, str | int]]:
        """Render the options as ordered query-string parameters."""
        params: list[tuple[str, str | int]] = []
        params.extend(("q", term) for term in self.q)
        params.extend(("order", term) for term in self.order)
        if self.limit:
            params.append(("limit", self.limit))
        if self.page:
            params.append(("page", self.page))
        if self.filter is not None:
            params.append(("filter", json.dumps(self.filter, separators=(",", ":"))))
        return params
