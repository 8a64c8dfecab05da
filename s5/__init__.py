"""S5 ORM - ActiveRecord-style client for the S5 JSON document store."""

from s5.core.client import S5Client
from s5.core.exceptions import (
    ConfigurationError,
    CreateError,
    DeleteError,
    FindError,
    NotPersistedError,
    OperationError,
    PatchError,
    QueryError,
    S5Error,
    UpdateError,
)
from s5.main import S5
from s5.modules.documents import (
    Document,
    QueryOptions,
    QueryResult,
    Record,
    create_collection,
)
from s5.modules.documents.query import (
    asc,
    contains,
    desc,
    eq,
    exists,
    gt,
    gte,
    in_,
    lt,
    lte,
    ne,
    nin,
    predicate,
)

__all__ = [
    "S5",
    "S5Client",
    "Document",
    "QueryOptions",
    "QueryResult",
    "Record",
    "create_collection",
    "S5Error",
    "ConfigurationError",
    "NotPersistedError",
    "OperationError",
    "QueryError",
    "FindError",
    "CreateError",
    "UpdateError",
    "PatchError",
    "DeleteError",
    "predicate",
    "eq",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "in_",
    "nin",
    "contains",
    "exists",
    "asc",
    "desc",
]
