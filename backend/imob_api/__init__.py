"""
Imob API — Application Package Initializer
===========================================

What: Marks the `imob_api` directory as a Python package.
Who:  Imported by uvicorn (`imob_api.main:app`), Alembic and pytest.

Architecture Note:
    The backend is a thin layered pipeline:

    ┌─────────────────────────────────────┐
    │  Middleware (CORS, IDs, Auth Gate)  │  ← every request
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Validator, Rules, Repo,  │  ← validation and persistence
    │            Token Service)           │
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← ORM table + Pydantic records
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    Failures raised anywhere below the routes travel up as `ImobError`
    subclasses and are turned into HTTP responses in one place
    (`imob_api.error_handlers`).
"""

__version__ = "1.0.0"
