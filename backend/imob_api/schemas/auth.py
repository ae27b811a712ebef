"""
Imob API — Authentication Schemas
==================================

What:  Token request/response bodies and the verified token payload.
"""

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    """Body of POST /auth/token."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_name: str = Field(alias="userName")
    password: str


class TokenResponse(BaseModel):
    token: str = Field(description="Signed bearer token for the Authorization header")


class TokenPayload(BaseModel):
    """
    What:  Claims of a verified token.
    Who:   Built by TokenService.verify(), attached to `request.state.identity`
           by the auth gate.

    Handlers should only read `subject_id` and `email`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    subject_id: str = Field(alias="sub")
    email: str
    issued_at: int = Field(alias="iat")
    expires_at: int = Field(alias="exp")
    issuer: str = Field(alias="iss")
    audience: str = Field(alias="aud")
