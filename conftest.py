"""
Pytest configuration and shared fixtures.

Provides an in-memory fake of the S5 document API (a FastAPI app reached
through httpx.ASGITransport) and collection-bound Document classes wired to
it or to an httpx.MockTransport.
"""

import json
import re
import uuid
from collections import defaultdict
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from httpx import ASGITransport

from s5.core.client import S5Client
from s5.core.config import get_settings
from s5.main import S5
from s5.modules.documents.collection import create_collection
from s5.modules.documents.models import Document

API_KEY = "ak_test_secret"
BASE_URL = "http://s5.test/api/v1"

PREDICATE_RE = re.compile(r"^(\w+)\(([^,]+),(.*)\)$")
MISSING = object()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": {"message": message}}, status_code=status_code)


def lookup(data: Any, path: str) -> Any:
    for key in path.split("."):
        if not isinstance(data, dict) or key not in data:
            return MISSING
        data = data[key]
    return data


def matches(record: dict, op: str, field: str, value: Any) -> bool:
    """Evaluate one predicate the way the S5 server does."""
    actual = lookup(record["data"], field)
    if op == "exists":
        return (actual is not MISSING) == bool(value)
    if actual is MISSING:
        return op in ("ne", "nin")
    if op == "eq":
        return actual == value
    if op == "ne":
        return actual != value
    if op in ("in", "nin"):
        if isinstance(actual, list):
            found = any(item in value for item in actual)
        else:
            found = actual in value
        return found if op == "in" else not found
    if op == "contains":
        return value in actual
    try:
        return {
            "gt": actual > value,
            "gte": actual >= value,
            "lt": actual < value,
            "lte": actual <= value,
        }[op]
    except TypeError:
        return False


def create_fake_api(api_key: str = API_KEY) -> FastAPI:
    """Build an in-memory S5 API; every request is recorded in ``app.state.calls``."""
    app = FastAPI()
    app.state.store = defaultdict(dict)
    app.state.calls = []
    router = APIRouter(prefix="/api/v1")

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        app.state.calls.append(
            {
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "params": request.query_params.multi_items(),
                "headers": dict(request.headers),
            }
        )
        if request.headers.get("authorization") != f"Bearer {api_key}":
            return error_response(401, "Invalid API key")
        return await call_next(request)

    def now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @router.get("/{collection}")
    async def list_documents(collection: str, request: Request):
        records = list(app.state.store[collection].values())

        conditions = []
        for term in request.query_params.getlist("q"):
            match = PREDICATE_RE.match(term)
            if not match:
                return error_response(400, f"Invalid query: {term}")
            op, field, raw = match.groups()
            conditions.append((op, field, json.loads(raw)))
        if "filter" in request.query_params:
            for op, fields in json.loads(request.query_params["filter"]).items():
                conditions.extend((op, field, value) for field, value in fields.items())
        records = [
            r for r in records if all(matches(r, *condition) for condition in conditions)
        ]

        for term in reversed(request.query_params.getlist("order")):
            field = term.lstrip("-")
            records.sort(
                key=lambda r: lookup(r["data"], field), reverse=term.startswith("-")
            )

        payload: dict[str, Any] = {"data": records}
        if "limit" in request.query_params:
            limit = int(request.query_params["limit"])
            page = int(request.query_params.get("page", 1))
            payload["data"] = records[(page - 1) * limit : page * limit]
            payload["pagination"] = {"page": page, "limit": limit, "total": len(records)}
        return {"data": payload}

    @router.get("/{collection}/{document_id}")
    async def get_document(collection: str, document_id: str):
        record = app.state.store[collection].get(document_id)
        if not record:
            return error_response(404, "Document not found")
        return {"data": record}

    @router.post("/{collection}", status_code=201)
    async def create_document(collection: str, request: Request):
        body = await request.json()
        if not isinstance(body.get("data"), dict):
            return error_response(422, "data must be an object")
        timestamp = now()
        record = {
            "id": str(uuid.uuid4()),
            "collection": collection,
            "data": body["data"],
            "version": 1,
            "created_at": timestamp,
            "updated_at": timestamp,
            "ttl_at": body.get("ttl_at"),
        }
        app.state.store[collection][record["id"]] = record
        return {"data": record}

    @router.put("/{collection}/{document_id}")
    async def replace_document(collection: str, document_id: str, request: Request):
        record = app.state.store[collection].get(document_id)
        if not record:
            return error_response(404, "Document not found")
        body = await request.json()
        record.update(
            data=body["data"],
            ttl_at=body.get("ttl_at"),
            version=record["version"] + 1,
            updated_at=now(),
        )
        return {"data": record}

    @router.patch("/{collection}/{document_id}/patch")
    async def merge_document(collection: str, document_id: str, request: Request):
        record = app.state.store[collection].get(document_id)
        if not record:
            return error_response(404, "Document not found")
        body = await request.json()
        record.update(
            data={**record["data"], **body["data"]},
            version=record["version"] + 1,
            updated_at=now(),
        )
        return {"data": record}

    @router.delete("/{collection}/{document_id}", status_code=204)
    async def delete_document(collection: str, document_id: str):
        if app.state.store[collection].pop(document_id, None) is None:
            return error_response(404, "Document not found")
        return Response(status_code=204)

    app.include_router(router)
    return app


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Keep environment configuration out of tests."""
    monkeypatch.delenv("S5_API_KEY", raising=False)
    monkeypatch.delenv("S5_BASE_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_api() -> FastAPI:
    """Fresh in-memory S5 API."""
    return create_fake_api()


@pytest.fixture
async def s5(fake_api: FastAPI) -> AsyncGenerator[S5, None]:
    """
    S5 entry point talking to the fake API.

    Usage:
        async def test_users(s5):
            User = s5.collection("users")
            user = await User.create({"name": "Ann"})
    """
    transport = ASGITransport(app=fake_api)
    async with S5(base_url=BASE_URL, api_key=API_KEY, transport=transport) as client:
        yield client


@pytest.fixture
def users(s5: S5) -> type[Document]:
    """Document class bound to the fake ``users`` collection."""
    return s5.collection("users")


@pytest.fixture
async def mock_collection() -> AsyncGenerator[Callable[..., type[Document]], None]:
    """
    Factory for Document classes served by an httpx.MockTransport handler.

    Usage:
        def handler(request: httpx.Request) -> httpx.Response: ...
        User = mock_collection(handler)
    """
    clients: list[S5Client] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response], name: str = "users"
    ) -> type[Document]:
        client = S5Client(
            base_url=BASE_URL,
            api_key=API_KEY,
            collection=name,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return create_collection(name, client)

    yield factory
    for client in clients:
        await client.aclose()


@pytest.fixture
def make_record() -> Callable[..., dict]:
    """Build a server record with sensible defaults."""

    def factory(**overrides: Any) -> dict:
        record = {
            "id": "doc-1",
            "collection": "users",
            "data": {"name": "Alice"},
            "version": 1,
            "created_at": "2024-05-20T10:00:00Z",
            "updated_at": "2024-05-20T10:00:00Z",
            "ttl_at": None,
        }
        record.update(overrides)
        return record

    return factory
