"""
Puff Backend: Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the error scenarios the API exposes.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the matching HTTP status code.
Who:   Raised by services, dependencies and middleware; caught by global handlers.

Exception Hierarchy:
    PuffError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PuffError(Exception):
    """
    Base exception for all Puff application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only returned where the
                  handler explicitly includes it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PuffError):
    """
    Raised when client input breaks a business rule.

    HTTP: 400 Bad Request. Schema-level problems (wrong types, out-of-range
    numbers) are answered with 422 by the RequestValidationError handler
    before we get here.

    Example response:
        {
            "error": "validation_error",
            "message": "Nothing to update",
            "details": {"field": "body"}
        }
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


class AuthenticationError(PuffError):
    """
    Raised when a request lacks valid credentials.

    When: missing/expired/garbled bearer token, wrong email or password.
    HTTP: 401 Unauthorized with `WWW-Authenticate: Bearer`.

    Login failures always use the same message so the response does not
    reveal whether an email is registered.
    """

    def __init__(
        self,
        message: str = "Invalid or expired credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PuffError):
    """
    Raised when a requested resource does not exist for the current user.

    HTTP: 404 Not Found. Records owned by another user are reported the same
    way as records that don't exist at all.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(PuffError):
    """Raised when a create would violate a uniqueness rule (e.g. duplicate email). HTTP 409."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PuffError):
    """
    Raised when database operations fail unexpectedly.

    HTTP: 500 Internal Server Error.

    Security Note:
        The message returned to the client is always generic. Query text,
        constraint names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PuffError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests, with a Retry-After header.
    """

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
