"""
Imob API — Token Issuance Route
================================

What:  POST /auth/token — the only route reachable without a bearer token.

Request Flow:
    1. FastAPI parses the JSON body (malformed JSON → 400)
    2. validate_token_request checks userName/password strings (→ 400)
    3. AuthService compares credentials (→ 401) and signs a token
    4. 201 {"token": "<jwt>"}
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from imob_api.exceptions import ValidationError
from imob_api.routes.deps import get_auth_service
from imob_api.schemas.auth import TokenResponse
from imob_api.schemas.common import ErrorResponse
from imob_api.services.auth_service import AuthService
from imob_api.services.validation import validate_token_request


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/token",
    status_code=201,
    response_model=TokenResponse,
    responses={
        201: {"description": "Token issued", "model": TokenResponse},
        400: {"description": "Malformed body", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def issue_token(
    payload: Any = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    credentials, errors = validate_token_request(payload)
    if errors:
        raise ValidationError(details=errors)

    token = auth_service.authenticate(credentials.user_name, credentials.password)
    return TokenResponse(token=token)
