"""
Imob API — Route Dependencies
==============================

What:  FastAPI dependencies that hand route handlers the objects built by
       `create_app()` (stored on `app.state`) and the caller identity set
       by the auth gate (stored on `request.state`).
"""

from fastapi import Request

from imob_api.config import Settings
from imob_api.database import Database
from imob_api.exceptions import MissingTokenError
from imob_api.schemas.auth import TokenPayload
from imob_api.services.auth_service import AuthService
from imob_api.services.customer_repository import CustomerRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_customer_repository(request: Request) -> CustomerRepository:
    return request.app.state.customer_repository


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_identity(request: Request) -> TokenPayload:
    """
    The verified token payload for this request.

    Always present behind the auth gate; raising here only happens if a
    route is mounted on a public path by mistake.
    """
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise MissingTokenError()
    return identity
