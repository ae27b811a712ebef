"""
Imob API — Service Info & Health Routes
========================================

What:  GET /       → banner with version and endpoint map
       GET /health → process uptime and database connectivity

Both sit behind the auth gate like every other route. /health always answers
200 while the process is serving; a failing database shows up as
"database": "disconnected" rather than as an error status.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from imob_api.config import Settings
from imob_api.database import Database
from imob_api.routes.deps import get_database, get_settings
from imob_api.schemas.common import HealthResponse, InfoResponse

router = APIRouter(tags=["Info"])

ENDPOINTS = {
    "auth": "POST /auth/token",
    "customers": "/customers",
    "health": "/health",
}


@router.get("/", response_model=InfoResponse, summary="Service banner")
async def service_info(settings: Settings = Depends(get_settings)) -> InfoResponse:
    return InfoResponse(
        message="Welcome to Imob Express API",
        version=settings.api_version,
        status="running",
        timestamp=datetime.now(timezone.utc),
        endpoints=dict(ENDPOINTS),
    )


@router.get("/health", response_model=HealthResponse, summary="Liveness and database status")
async def health_check(
    request: Request,
    database: Database = Depends(get_database),
) -> HealthResponse:
    db_connected = await database.ping()

    return HealthResponse(
        status="OK",
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        timestamp=datetime.now(timezone.utc),
        database="connected" if db_connected else "disconnected",
    )
