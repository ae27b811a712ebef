"""
Imob API — Custom Exception Hierarchy
======================================

What:  Closed set of application exceptions, one per failure kind.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned) and a `kind` tag. `imob_api.error_handlers`
       maps every kind to a fixed (status, envelope) pair.
Who:   Raised by the validator, repository, token service and auth gate.

Exception Hierarchy:
    ImobError (base)
    ├── ValidationError        → 400 {error, details}
    ├── DuplicateKeyError      → 400 {error, message}
    ├── MissingTokenError      → 401 {error}
    ├── AuthenticationError    → 401 {error}            (bad credentials)
    ├── InvalidTokenError      → 403 {error}
    │   └── ExpiredTokenError  → 403 {error}
    ├── NotFoundError          → 404 {error, message}
    └── DatabaseError          → 500 {error, message}   (unclassified)
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Failure kinds understood by the error normalizer."""

    VALIDATION = "validation"
    DUPLICATE_KEY = "duplicate_key"
    MISSING_TOKEN = "missing_token"
    BAD_CREDENTIALS = "bad_credentials"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    NOT_FOUND = "not_found"
    UNCLASSIFIED = "unclassified"


class ImobError(Exception):
    """
    Base exception for all Imob API errors.

    Attributes:
        message:  User-facing description (safe to return in an API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ImobError):
    """
    Raised when input fails shape or field-level constraints.

    `details` holds every violation found, not just the first one.

    Example response:
        {"error": "Validation failed", "details": ["Name must be at least 2 characters long"]}
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        details: Optional[List[str]] = None,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = list(details or [message])


class DuplicateKeyError(ImobError):
    """
    Raised when a write would break a uniqueness constraint.

    The same error is used whether `document` or `email` collided; the
    offending column, when known, only goes into `context`.
    """

    kind = ErrorKind.DUPLICATE_KEY

    def __init__(
        self,
        message: str = "A customer with this document or email already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingTokenError(ImobError):
    """No bearer credential on a protected request."""

    kind = ErrorKind.MISSING_TOKEN

    def __init__(self, message: str = "Access token required", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthenticationError(ImobError):
    """Username/password rejected by POST /auth/token."""

    kind = ErrorKind.BAD_CREDENTIALS

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(ImobError):
    """
    Bearer token is malformed, badly signed, or issued for another
    issuer/audience. The message never says which check failed.
    """

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ExpiredTokenError(InvalidTokenError):
    """Bearer token signature is fine but its `exp` claim has passed."""

    kind = ErrorKind.EXPIRED_TOKEN

    def __init__(self, message: str = "Token expired", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotFoundError(ImobError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the repository converts that
    into this exception so the route never has to check.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"No {resource} found with ID: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class DatabaseError(ImobError):
    """
    Raised when the database driver fails unexpectedly.

    The message returned to the client is always generic; driver details go
    into `context` and the server log only.
    """

    kind = ErrorKind.UNCLASSIFIED

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
