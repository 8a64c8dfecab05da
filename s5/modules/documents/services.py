"""Document services - one HTTP round trip per operation against the S5 API."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from s5.core.client import S5Client
from s5.core.exceptions import (
    CreateError,
    DeleteError,
    FindError,
    OperationError,
    PatchError,
    QueryError,
    UpdateError,
)
from s5.modules.documents.schemas import QueryOptions, Record, RecordPage

logger = logging.getLogger(__name__)


def error_reason(exc: Exception) -> str:
    """Prefer the server's structured error message over the transport text."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            message = exc.response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = None
        if message:
            return str(message)
    return str(exc)


@contextmanager
def wrap_errors(error_cls: type[OperationError]) -> Iterator[None]:
    """Re-raise transport and response-shape failures as ``error_cls``."""
    try:
        yield
    except httpx.HTTPError as e:
        status_code = None
        if isinstance(e, httpx.HTTPStatusError):
            status_code = e.response.status_code
        error = error_cls(error_reason(e), status_code=status_code)
        logger.warning(str(error))
        raise error from e
    except (KeyError, TypeError, ValueError) as e:
        # unserializable payload or a 2xx with an unexpected body
        error = error_cls(str(e))
        logger.warning(str(error))
        raise error from e


def build_payload(data: dict[str, Any], **options: Any) -> dict[str, Any]:
    """
    Request body for create and update; unset options are omitted.

    Values are made JSON-safe when the request is sent, so serialization
    failures surface as the operation's error.
    """
    payload = {"data": data}
    payload.update({k: v for k, v in options.items() if v is not None})
    return payload


async def list_records(client: S5Client, options: QueryOptions) -> RecordPage:
    """Fetch one page of records matching the query options."""
    with wrap_errors(QueryError):
        response = await client.request("GET", client.path, params=options.to_params())
        return RecordPage.model_validate(response.json()["data"])


async def get_record(client: S5Client, record_id: str) -> Record | None:
    """Fetch a record by ID, or None when the server reports 404."""
    with wrap_errors(FindError):
        try:
            response = await client.request("GET", client.record_path(record_id))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        return Record.model_validate(response.json()["data"])


async def insert_record(client: S5Client, payload: dict[str, Any]) -> Record:
    """Create a record in the bound collection."""
    with wrap_errors(CreateError):
        response = await client.request(
            "POST", client.path, json=to_jsonable_python(payload)
        )
        return Record.model_validate(response.json()["data"])


async def replace_record(
    client: S5Client, record_id: str, payload: dict[str, Any]
) -> Record:
    """Overwrite a record's data."""
    with wrap_errors(UpdateError):
        response = await client.request(
            "PUT", client.record_path(record_id), json=to_jsonable_python(payload)
        )
        return Record.model_validate(response.json()["data"])


async def merge_record(
    client: S5Client, record_id: str, data: dict[str, Any]
) -> Record:
    """Merge ``data`` into a record server-side."""
    with wrap_errors(PatchError):
        response = await client.request(
            "PATCH",
            f"{client.record_path(record_id)}/patch",
            json=to_jsonable_python({"data": data}),
        )
        return Record.model_validate(response.json()["data"])


async def delete_record(client: S5Client, record_id: str) -> bool:
    """Delete a record by ID."""
    with wrap_errors(DeleteError):
        await client.request("DELETE", client.record_path(record_id))
    return True
