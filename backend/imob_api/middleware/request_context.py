"""
Imob API — Request Context Middleware
======================================

What:  Binds a per-request context (correlation ID + authenticated subject)
       and returns the ID in the X-Request-ID response header.
How:   A mutable RequestContext is stored in a ContextVar and on
       request.state. Inner middleware run in a copied context, so they
       update the shared object (`bind_subject`) instead of re-setting the
       variable; the outer access log then sees the subject.
Who:   Read by the access log, the auth gate and the error handlers.

A client-supplied X-Request-ID is reused only if it is a short token of
letters, digits, '-' or '_'; anything else is replaced so log lines stay
one line per request.
"""

import re
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass
class RequestContext:
    request_id: str
    subject_id: Optional[str] = None


_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "imob_request_context", default=None
)


def current_request_id() -> str:
    """Correlation ID of the request being served, or "" outside a request."""
    context = _request_context.get()
    return context.request_id if context else ""


def current_subject() -> Optional[str]:
    context = _request_context.get()
    return context.subject_id if context else None


def bind_subject(subject_id: str) -> None:
    """Record the token subject once the auth gate has accepted the request."""
    context = _request_context.get()
    if context is not None:
        context.subject_id = subject_id


def resolve_request_id(client_value: Optional[str]) -> str:
    if client_value and _CLIENT_ID_PATTERN.match(client_value):
        return client_value
    return uuid.uuid4().hex[:8]


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = RequestContext(request_id=resolve_request_id(request.headers.get(REQUEST_ID_HEADER)))
        request.state.context = context

        token = _request_context.set(context)
        try:
            response = await call_next(request)
        finally:
            _request_context.reset(token)

        response.headers[REQUEST_ID_HEADER] = context.request_id
        return response
