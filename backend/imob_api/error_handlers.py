"""
Imob API — Error Normalizer
============================

What:  Maps every failure to a fixed (HTTP status, JSON envelope) pair.
How:   `normalize_error()` is a pure mapping over `ErrorKind`;
       `register_exception_handlers()` wires it into FastAPI for application
       errors, framework validation errors, unknown routes and anything
       unexpected. The auth gate calls `error_response()` directly because
       it answers before the router runs.

Mapping:
    ValidationError          → 400 {error, details}
    DuplicateKeyError        → 400 {error, message}
    MissingTokenError        → 401 {error}
    AuthenticationError      → 401 {error}
    InvalidTokenError        → 403 {error}
    ExpiredTokenError        → 403 {error}
    NotFoundError            → 404 {error, message}
    DatabaseError/Exception  → 500 {error, message} (+ stack outside production)

Security: outside development/test the 500 envelope carries a generic
message only; tracebacks are logged server-side.
"""

import logging
import traceback
from typing import Any, Dict, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imob_api.exceptions import ErrorKind, ImobError, ValidationError
from imob_api.middleware.request_context import current_request_id
from imob_api.services.validation import describe_errors

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An unexpected error occurred. Please try again or contact support."

_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_KEY: 400,
    ErrorKind.MISSING_TOKEN: 401,
    ErrorKind.BAD_CREDENTIALS: 401,
    ErrorKind.INVALID_TOKEN: 403,
    ErrorKind.EXPIRED_TOKEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNCLASSIFIED: 500,
}


def normalize_error(exc: BaseException, include_stack: bool = False) -> Tuple[int, Dict[str, Any]]:
    """
    Build the status code and response body for `exc`.

    Args:
        exc:           Any exception; non-ImobError values are unclassified
        include_stack: Add the formatted traceback and the raw message to
                       500 responses (never enabled in production)
    """
    kind = exc.kind if isinstance(exc, ImobError) else ErrorKind.UNCLASSIFIED
    status = _STATUS_BY_KIND[kind]

    if kind is ErrorKind.VALIDATION:
        envelope: Dict[str, Any] = {"error": exc.message, "details": list(exc.details)}
    elif kind is ErrorKind.DUPLICATE_KEY:
        envelope = {"error": "Duplicate key", "message": exc.message}
    elif kind in (
        ErrorKind.MISSING_TOKEN,
        ErrorKind.BAD_CREDENTIALS,
        ErrorKind.INVALID_TOKEN,
        ErrorKind.EXPIRED_TOKEN,
    ):
        envelope = {"error": exc.message}
    elif kind is ErrorKind.NOT_FOUND:
        resource = getattr(exc, "resource", "resource")
        envelope = {"error": f"{resource.capitalize()} not found", "message": exc.message}
    else:
        if isinstance(exc, ImobError):
            message = exc.message
        else:
            message = str(exc) if include_stack and str(exc) else GENERIC_SERVER_MESSAGE
        envelope = {"error": "Internal Server Error", "message": message}
        if include_stack:
            envelope["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
    return status, envelope


def error_response(exc: BaseException, include_stack: bool = False) -> JSONResponse:
    status, envelope = normalize_error(exc, include_stack)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=envelope, headers=headers)


def register_exception_handlers(app: FastAPI, include_stack: bool) -> None:
    """
    Register global exception handlers for consistent error responses.

    Args:
        app:           The application being built
        include_stack: Whether 500 responses may carry tracebacks
    """

    @app.exception_handler(ImobError)
    async def handle_imob_error(request: Request, exc: ImobError):
        rid = current_request_id()
        if exc.kind is ErrorKind.UNCLASSIFIED:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        elif exc.kind is ErrorKind.VALIDATION:
            logger.warning("[%s] Validation error: %s", rid, "; ".join(exc.details))
        else:
            logger.info("[%s] %s: %s", rid, exc.kind.value, exc.message)
        return error_response(exc, include_stack)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON, wrong body type or bad query values → 400."""
        details = describe_errors(list(exc.errors()))
        rid = current_request_id()
        logger.warning("[%s] Request validation error on %s: %s", rid, request.url.path, details)
        return error_response(ValidationError(details=details), include_stack)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Unknown routes and method mismatches raised by the router."""
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "error": f"Not Found - {request.url.path}",
                    "message": f"No route matches {request.method} {request.url.path}",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last resort for failures outside RequestLoggingMiddleware, which
        answers route exceptions itself.
        """
        rid = current_request_id()
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(exc, include_stack)

