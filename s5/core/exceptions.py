"""
Custom exceptions for the S5 client.

Every failure surfaced by the library derives from S5Error, which carries
the human readable detail and, when the server answered, its status code.
"""


class S5Error(Exception):
    """Base exception for client errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        status_code: int | None = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class ConfigurationError(S5Error):
    """Client is missing required settings."""

    def __init__(self, detail: str = "Invalid client configuration"):
        super().__init__(detail=detail)


class NotPersistedError(S5Error):
    """Operation requires a document that has been saved to the server."""

    def __init__(self, detail: str = "Document has no ID"):
        super().__init__(detail=detail)


class OperationError(S5Error):
    """A request to the S5 API failed."""

    label = "Operation"

    def __init__(self, reason: str = "Request error", status_code: int | None = None):
        super().__init__(detail=f"{self.label} failed: {reason}", status_code=status_code)
        self.reason = reason


class QueryError(OperationError):
    label = "Query"


class FindError(OperationError):
    label = "Find"


class CreateError(OperationError):
    label = "Create"


class UpdateError(OperationError):
    label = "Update"


class PatchError(OperationError):
    label = "Patch"


class DeleteError(OperationError):
    label = "Delete"
