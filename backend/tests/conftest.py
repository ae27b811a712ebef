"""
Imob API — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the database gets its own SQLite file under
       pytest's tmp_path (aiosqlite driver), so tests never share state.

Fixture Hierarchy:
    settings            Settings pointing at a fresh SQLite file
    ├── database        connected Database (schema created)
    │   └── repository  CustomerRepository over that database
    ├── token_service   TokenService built from the same secret
    └── app             create_app(settings) with its lifespan running
        ├── client      HTTPX AsyncClient over ASGITransport
        └── auth_headers  {"Authorization": "Bearer <valid token>"}
"""

import os
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Read by the module-level app in imob_api.main at import time; that app is
# never started during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./imob_test.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from imob_api.config import Settings  # noqa: E402
from imob_api.database import Database  # noqa: E402
from imob_api.main import create_app  # noqa: E402
from imob_api.services.customer_repository import CustomerRepository  # noqa: E402
from imob_api.services.token_service import TokenService, TokenSettings  # noqa: E402

TEST_SECRET = "test-secret-not-for-production"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"
ADMIN_EMAIL = "admin@imob.io"


# ══════════════════════════════════════════════════════════════════════════
# Configuration & Services
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'imob_test.db'}",
        environment="test",
        log_level="WARNING",
        jwt_secret=TEST_SECRET,
        jwt_expires_in="1h",
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        admin_subject_id="42",
        admin_email=ADMIN_EMAIL,
    )


@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService(TokenSettings.from_settings(settings))


@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    db = Database(settings)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def repository(database) -> CustomerRepository:
    return CustomerRepository(database.session_factory)


# ══════════════════════════════════════════════════════════════════════════
# Application & HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app(settings):
    """
    A fully wired application with its lifespan running.

    ASGITransport does not send lifespan events, so startup/shutdown are
    driven explicitly.
    """
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    raise_app_exceptions=False lets tests observe the 500 response that the
    catch-all handler produces instead of the re-raised exception.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def auth_headers(app) -> Dict[str, str]:
    token = app.state.token_service.issue("42", ADMIN_EMAIL)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_payload() -> Dict[str, object]:
    """A valid POST /customers body."""
    return {
        "document": "12345678901",
        "name": "Joana Silva",
        "email": "Joana@Imob.io",
        "role": "agent",
        "profile": {"phone": "+55 11 99999-0000", "bio": "Senior agent"},
    }
