"""
Imob API — FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) builds every component from one
       Settings object, stores them on app.state and returns the app.
Who:   uvicorn (`uvicorn imob_api.main:app`), the `imob-api` console script,
       and the test suite (which passes its own Settings).

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                         FastAPI App                          │
    │                                                              │
    │  Middleware Chain (outermost first):                         │
    │  CORS → GZip → Security Headers → Request Context →          │
    │  Logging + error boundary → Auth Gate → router               │
    │                                                              │
    │  Routes:                                                     │
    │  POST /auth/token │ /customers CRUD │ GET / │ GET /health    │
    │                                                              │
    │  Exception Handlers:                                         │
    │  Validation/Duplicate→400 │ Token→401/403 │ NotFound→404     │
    │  anything else→500                                           │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Refuse to start in production with default secrets
    3. Connect to the database (create schema when enabled); failure aborts
    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from imob_api import __version__
from imob_api.config import Settings
from imob_api.database import Database
from imob_api.error_handlers import register_exception_handlers
from imob_api.middleware.auth_gate import AuthGateMiddleware
from imob_api.middleware.logging import RequestLoggingMiddleware
from imob_api.middleware.request_context import RequestContextMiddleware
from imob_api.middleware.security_headers import SecurityHeadersMiddleware
from imob_api.routes import auth, customers, index
from imob_api.services.auth_service import AuthService
from imob_api.services.customer_repository import CustomerRepository
from imob_api.services.token_service import TokenService, TokenSettings

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure process-wide logging once, before anything else logs.

    Format: 2026-01-01T12:00:00 [INFO] imob.access: GET /customers 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Imob API starting up (%s)...", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    try:
        await database.connect()
    except Exception as e:
        logger.error("Database connection failed: %s", str(e))
        raise

    app.state.started_at = time.monotonic()
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Imob API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build from; read from the environment
                  when omitted.

    Returns: Fully configured FastAPI instance. Nothing touches the database
             until the lifespan runs.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Imob Express API",
        description="Customer registry for real-estate agencies, behind bearer-token authentication.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Components ────────────────────────────────────────────────────────
    database = Database(settings)
    token_service = TokenService(TokenSettings.from_settings(settings))

    app.state.settings = settings
    app.state.database = database
    app.state.token_service = token_service
    app.state.auth_service = AuthService(settings, token_service)
    app.state.customer_repository = CustomerRepository(database.session_factory)
    app.state.started_at = time.monotonic()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost).
    # Execution order: CORS → GZip → SecurityHeaders → RequestContext → Logging
    #                  → AuthGate → router

    app.add_middleware(AuthGateMiddleware, token_service=token_service)

    # Answers unexpected route exceptions with the 500 envelope, inside the
    # layers that add X-Request-ID, security and CORS headers
    app.add_middleware(
        RequestLoggingMiddleware,
        include_stack=not settings.is_production,
        debug_requests=not settings.is_production,
    )

    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)

    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Outermost, so preflight OPTIONS requests are answered before the auth gate
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, include_stack=not settings.is_production)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(customers.router)
    app.include_router(index.router)

    return app


def run() -> None:
    """Console entry point: `imob-api`."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "imob_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `imob_api.main:app` to be importable
app = create_app()
