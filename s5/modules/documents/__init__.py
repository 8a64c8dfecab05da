"""Documents module - ActiveRecord-style access to S5 collections."""

from s5.modules.documents.collection import create_collection
from s5.modules.documents.models import Document, QueryResult
from s5.modules.documents.schemas import QueryOptions, Record

__all__ = ["Document", "QueryOptions", "QueryResult", "Record", "create_collection"]
