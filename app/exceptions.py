"""
Quai Antique API — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for every client-facing failure.
How:   Each exception carries a user-safe message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into structured JSON error responses with the right HTTP status.
Who:   Raised by services, the authenticator and middleware.

Exception Hierarchy:
    QuaiAntiqueError (base)
    ├── ValidationError             → 400 Bad Request
    │   ├── MalformedPayloadError   → 400 (body is not a mappable JSON object)
    │   └── InvalidCredentialError  → 400 (empty/missing password at registration)
    ├── UnauthenticatedError        → 401 Unauthorized
    ├── ForbiddenError              → 403 Forbidden
    ├── NotFoundError               → 404 Not Found
    ├── DuplicateIdentityError      → 409 Conflict
    ├── RateLimitExceededError      → 429 Too Many Requests
    ├── HashingError                → 500 Internal Server Error
    └── DatabaseError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class QuaiAntiqueError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler explicitly opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuaiAntiqueError):
    """Raised when client input fails a business validation rule."""

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


class MalformedPayloadError(ValidationError):
    """
    Raised when the request body cannot be parsed or mapped onto a record.

    FastAPI's own RequestValidationError is converted to this error so that
    clients see one 400 shape for every unusable body.
    """

    def __init__(
        self,
        message: str = "The request body is not a valid JSON object",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialError(ValidationError):
    """Raised when a registration payload carries no usable password."""

    def __init__(self, message: str = "A non-empty password is required"):
        super().__init__(message=message, field="password")


class UnauthenticatedError(QuaiAntiqueError):
    """
    Raised when credentials or a bearer token cannot be resolved to a user.

    The message never says whether the email exists: unknown accounts and wrong
    passwords produce the same error.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message)


class ForbiddenError(QuaiAntiqueError):
    """Raised when an authenticated user targets a record they do not own."""

    def __init__(self, message: str = "You are not allowed to access this resource"):
        super().__init__(message=message)


class NotFoundError(QuaiAntiqueError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"No {resource} found for {resource_id} id"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DuplicateIdentityError(QuaiAntiqueError):
    """Raised when an email is missing or already belongs to another account."""

    def __init__(self, message: str = "An account with this email already exists"):
        super().__init__(message=message, context={"field": "email"})


class RateLimitExceededError(QuaiAntiqueError):
    """Raised when a client exceeds the authentication rate limit."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many authentication attempts. Please wait {retry_after} seconds."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class HashingError(QuaiAntiqueError):
    """
    Raised when the password hashing backend fails.

    Never part of a normal request path: it signals misconfiguration, and no
    user record is persisted when it occurs.
    """

    def __init__(
        self,
        message: str = "Password hashing is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(QuaiAntiqueError):
    """
    Raised when a database operation fails unexpectedly.

    The client always gets a generic message; SQL details stay in the logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
