"""
Notes API: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for each failure the API can report.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return JSON error bodies with the matching HTTP status code.
Who:   Raised by services and route handlers; caught by global handlers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError               → 400 Bad Request
    ├── StorageError                  → 500 Internal Server Error
    │   └── DatabaseUnavailableError  → 500 (diagnostic endpoint, exposes detail)
    └── UpstreamFetchError            → 500 Internal Server Error

The `message` is what the client sees in the `error` key. `context` is logged
server-side only and never rendered, except by the /db-check handler.
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    When:    Missing, non-string or blank note title.
    HTTP:    400 Bad Request

    Example response:
        {"error": "title is required"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StorageError(NotesAPIError):
    """
    Raised when a database operation fails.

    What:    A query or insert failed, the connection could not be opened, or
             no pooled connection became free within the pool timeout.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is the operation-level summary
        ("Failed to fetch notes"). The driver error is kept in `context` and
        logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseUnavailableError(StorageError):
    """
    Raised by the diagnostic endpoint when the database cannot be reached.

    Unlike StorageError, the handler for this one renders the driver message
    and error code, since reporting them is the purpose of /db-check.

    Example response:
        {"error": "DB connection failed", "message": "...", "code": "ECONNREFUSED"}
    """

    def __init__(
        self,
        detail: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["detail"] = detail
        ctx["code"] = code
        super().__init__(message="DB connection failed", context=ctx)
        self.detail = detail
        self.code = code


class UpstreamFetchError(NotesAPIError):
    """
    Raised when the remote posts source is unreachable or returns bad data.

    When:    Connection/timeout errors, non-2xx status, non-JSON or non-list
             body, items without `id`/`title`.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Failed to fetch posts",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
