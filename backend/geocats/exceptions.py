"""
GeoCats Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message, an optional context dict, an
       HTTP status code and a machine-readable error code. Global exception
       handlers (registered in main.py) catch these and return structured
       JSON error responses.
Who:   Raised by services, auth helpers and middleware; caught by global handlers.

Exception Hierarchy:
    GeoCatsError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized (missing/invalid token)
    ├── AuthorizationError       → 403 Forbidden (not owner / not admin)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── StoreError               → 500 Internal Server Error
    │   ├── CreationError
    │   ├── ReadError
    │   ├── UpdateError
    │   ├── DeletionError
    │   └── BoundingBoxError
    └── FileStorageError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class GeoCatsError(Exception):
    """
    Base exception for all GeoCats application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned for 5xx errors)
        status_code:  HTTP status the central responder answers with
        error_code:   Machine-readable code placed in the response body
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GeoCatsError):
    """
    Raised when client input fails a declared field rule.

    HTTP:    400 Bad Request

    The message lists every failing field as ``"<msg>: <param>"`` joined by
    ``", "``, e.g. ``"Field required: cat_name, Input should be a valid number: weight"``.
    """

    status_code = 400
    error_code = "validation_error"

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


class AuthenticationError(GeoCatsError):
    """Missing, malformed, or expired credentials. HTTP: 401 Unauthorized."""

    status_code = 401
    error_code = "authentication_error"

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(GeoCatsError):
    """
    Raised when an authenticated caller is not permitted to act on a resource.

    When:    Caller is not the owner of the cat, or not an admin for an
             admin-only operation.
    HTTP:    403 Forbidden (authenticated, but not permitted)
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(GeoCatsError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/cats/{id} with an unknown id, or the current user's
             record vanished after the token was issued.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(GeoCatsError):
    """Client exceeded the per-IP request rate limit. HTTP: 429."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class StoreError(GeoCatsError):
    """
    Base for failures of a document-store operation.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is generic ("Error creating cat").
        Driver details (constraint names, SQL) stay in ``context`` and are
        only logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CreationError(StoreError):
    """Insert failed, including unique-constraint violations."""


class ReadError(StoreError):
    """Query failed."""


class UpdateError(StoreError):
    """Update failed, including unique-constraint violations."""


class DeletionError(StoreError):
    """Delete failed."""


class BoundingBoxError(StoreError):
    """Bounding box was malformed or the geographic query failed."""


class FileStorageError(GeoCatsError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
