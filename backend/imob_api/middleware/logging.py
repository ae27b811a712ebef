"""
Imob API — Access Log & Error Boundary Middleware
==================================================

What:  Writes one access line per request on the `imob.access` logger and
       turns exceptions that escaped the routes into the 500 envelope.
How:   Wraps the downstream call. The line carries the request ID and, once
       the auth gate has accepted the token, the subject (`sub`) that made
       the call. Exceptions are answered here, inside the request context
       and CORS layers, so 500 responses keep X-Request-ID and CORS headers.

Access line:
    POST /customers 201 12.4ms rid=3f9c01aa sub=42
    GET /customers 401 0.3ms rid=77be02c1 sub=-

Never logged: request bodies, Authorization headers, tokens. GET /health is
not logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from imob_api.error_handlers import error_response
from imob_api.middleware.request_context import current_request_id, current_subject

access_logger = logging.getLogger("imob.access")
logger = logging.getLogger(__name__)

UNLOGGED_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, include_stack: bool = False, debug_requests: bool = False):
        super().__init__(app)
        self._include_stack = include_stack
        self._debug_requests = debug_requests

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        rid = current_request_id()

        if self._debug_requests and request.query_params:
            access_logger.debug("[%s] %s %s query=%s", rid, request.method, request.url.path, dict(request.query_params))

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled %s on %s %s: %s",
                rid,
                type(exc).__name__,
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            response = error_response(exc, self._include_stack)

        if request.url.path not in UNLOGGED_PATHS:
            elapsed_ms = (time.perf_counter() - started) * 1000
            subject = current_subject()
            access_logger.log(
                _level_for(response.status_code),
                "%s %s %d %.1fms rid=%s sub=%s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                rid,
                subject or "-",
                extra={"request_id": rid, "subject_id": subject, "status": response.status_code},
            )
        return response
