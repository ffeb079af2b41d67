"""
TripNest Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per error category.
How:   Each exception carries a user-safe message and an optional context dict.
       Global handlers (registered in main.py) map them to HTTP responses.
Who:   Raised by services, guards and routes; caught by the global handlers.

Exception Hierarchy:
    TripNestError (base)
    ├── ValidationError         → 400 Bad Request
    ├── UnauthorizedError       → 401 Unauthorized
    │   └── LoginRequiredError  → 302 redirect to the login page
    ├── ForbiddenError          → 403 Forbidden
    ├── NotFoundError           → 404 Not Found
    ├── DuplicateKeyError       → 409 Conflict
    ├── OAuthError              → 302 redirect to the login page
    ├── FileStorageError        → 500 Internal Server Error
    └── DatabaseError           → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TripNestError(Exception):
    """
    Base exception for all TripNest application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TripNestError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, unparseable numbers, unknown references,
             too many or unsupported uploads.
    HTTP:    400 Bad Request
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


class UnauthorizedError(TripNestError):
    """No session, or credentials that do not match. HTTP 401."""

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LoginRequiredError(UnauthorizedError):
    """
    Raised by the authentication guard.

    Unlike a bare UnauthorizedError this is rendered as a redirect to the
    login page, matching what browser clients of the guarded routes expect.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Login required", context=context)


class ForbiddenError(TripNestError):
    """Authenticated, but the role is below what the route requires. HTTP 403."""

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TripNestError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    (and malformed identifiers) into this exception.
    HTTP:    404 Not Found
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
        self.resource = resource


class DuplicateKeyError(TripNestError):
    """
    Raised when a unique constraint is violated (e.g. username already taken).

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "A record with the same unique value already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class OAuthError(TripNestError):
    """
    Raised when the OAuth handshake cannot be completed.

    When:    Provider not configured, state mismatch, token exchange or
             profile fetch failed.
    HTTP:    302 redirect to the login page (the failure redirect)
    """

    def __init__(
        self,
        message: str = "Sign-in with the external provider failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(TripNestError):
    """
    Raised when file system operations fail (disk full, permission denied).

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TripNestError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the detailed
    error is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
