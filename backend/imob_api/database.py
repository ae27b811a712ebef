"""
Imob API — Database Engine and Session Management
==================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `Database` is built from `Settings` by `create_app()`; it owns the one
       long-lived connection pool and hands out sessions to the repository.
Who:   CustomerRepository (sessions), health route (ping), lifespan
       (connect/dispose), Alembic (Base.metadata).

Connection Pooling Strategy (PostgreSQL / asyncpg):
    pool_size + max_overflow:  upper bound on concurrent connections
    pool_timeout:              seconds to wait for a free connection
    pool_pre_ping:             discard stale connections before use
    connect/command timeout:   passed to asyncpg through connect_args

    SQLite (tests) uses SQLAlchemy's default pool for the dialect and
    ignores the sizing options.
"""

import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from imob_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


def _engine_options(settings: Settings) -> Dict[str, Any]:
    """Builds create_async_engine() keyword arguments for the configured backend."""
    url = make_url(settings.database_url)
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}

    if url.get_backend_name() == "sqlite":
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
    if url.get_driver_name() == "asyncpg":
        options["connect_args"] = {
            "timeout": settings.db_connect_timeout,
            "command_timeout": settings.db_command_timeout,
        }
    return options


class Database:
    """
    Owns the async engine and the session factory.

    expire_on_commit=False keeps ORM attributes readable after commit, which
    the repository relies on when it converts rows into records.
    """

    def __init__(self, settings: Settings):
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **_engine_options(settings)
        )
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._create_schema = settings.db_create_schema

    async def connect(self) -> None:
        """
        Verify connectivity and, if enabled, create tables and unique indexes.

        Raises whatever the driver raises; the lifespan handler lets that
        abort startup.
        """
        # Registers the customers table on Base.metadata
        from imob_api.models import customer  # noqa: F401

        async with self.engine.begin() as conn:
            if self._create_schema:
                await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("SELECT 1"))
        logger.info("Database connected (%s)", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Lightweight connectivity check used by GET /health."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Closes every pooled connection; called on shutdown."""
        await self.engine.dispose()
