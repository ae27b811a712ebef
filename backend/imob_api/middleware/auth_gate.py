"""
Imob API — Auth Gate Middleware
================================

What:  Requires a valid bearer token on every request except the token
       issuance path.
How:   Reads `Authorization: Bearer <token>`, verifies it with TokenService
       and stores the payload on `request.state.identity`. Rejections are
       answered here; the router never runs for them.

Responses:
    no/empty bearer credential   → 401 {"error": "Access token required"}
    invalid or expired token     → 403 {"error": "Invalid token" | "Token expired"}

401 asks for credentials; 403 rejects the ones that were sent.
"""

import logging
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from imob_api.error_handlers import error_response
from imob_api.exceptions import InvalidTokenError, MissingTokenError
from imob_api.middleware.request_context import bind_subject, current_request_id
from imob_api.services.token_service import TokenService

logger = logging.getLogger(__name__)

TOKEN_PATH = "/auth/token"


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """
    Return the credential from an Authorization header value, or None.

    "Bearer abc" → "abc"; the scheme is matched case-insensitively.
    """
    if not header_value:
        return None
    scheme, _, credential = header_value.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    credential = credential.strip()
    return credential or None


class AuthGateMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        token_service: TokenService,
        public_paths: Iterable[str] = (TOKEN_PATH,),
    ):
        super().__init__(app)
        self._tokens = token_service
        self._public_paths = frozenset(public_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self._public_paths:
            return await call_next(request)

        rid = current_request_id()
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            logger.warning("[%s] Missing bearer token for %s", rid, request.url.path)
            return error_response(MissingTokenError())

        try:
            identity = self._tokens.verify(token)
        except InvalidTokenError as e:
            logger.warning("[%s] Rejected token for %s: %s", rid, request.url.path, e.message)
            return error_response(e)

        request.state.identity = identity
        bind_subject(identity.subject_id)
        return await call_next(request)
