"""
Imob API — Shared Response Schemas
===================================

What:  Error envelope and informational endpoint bodies.
Why:   Clients need one error structure to parse programmatically; the
       `error` key is always present, the rest depends on the failure kind.

Error envelope examples:
    400 validation   {"error": "Validation failed", "details": ["Name is required"]}
    400 duplicate    {"error": "Duplicate key", "message": "A customer with ..."}
    401 / 403        {"error": "Access token required"}
    404              {"error": "Customer not found", "message": "No customer found with ID: ..."}
    500              {"error": "Internal Server Error", "message": "..."}
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(description="Machine-readable error string")
    message: Optional[str] = Field(default=None, description="Human-readable description")
    details: Optional[List[str]] = Field(default=None, description="Validation violations")
    stack: Optional[str] = Field(default=None, description="Traceback (non-production only)")


class InfoResponse(BaseModel):
    """GET / — service banner."""

    message: str
    version: str
    status: str
    timestamp: datetime
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    """GET /health — liveness plus database connectivity."""

    status: str = Field(description="Always 'OK' while the process serves requests")
    uptime: float = Field(description="Seconds since the application started")
    timestamp: datetime
    database: str = Field(description="connected | disconnected")
