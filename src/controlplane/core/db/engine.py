"""Database engine management."""

import ssl
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.db.session import get_session


def build_connect_args(ssl_mode: str, statement_cache_size: int | None = None) -> dict[str, Any]:
    """Get asyncpg connection arguments including SSL configuration."""
    connect_args: dict[str, Any] = {}
    if statement_cache_size is not None:
        connect_args["statement_cache_size"] = statement_cache_size

    if ssl_mode != "disable":
        ssl_context = ssl.create_default_context()
        if ssl_mode == "prefer" or ssl_mode == "require":
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        elif ssl_mode in ("verify-ca", "verify-full"):
            ssl_context.check_hostname = ssl_mode == "verify-full"
            ssl_context.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ssl_context

    return connect_args


class ControlPlaneDatabase:
    """Owns the control-plane engines.

    One instance is built at process start (API lifespan or worker main),
    passed to whatever needs it, and disposed on shutdown.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._sync_engine: Engine | None = None

    def init(self) -> AsyncEngine:
        """Create the async engine. Safe to call more than once."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
                pool_pre_ping=True,
                connect_args=build_connect_args(
                    self.settings.database_ssl_mode,
                    self.settings.database_statement_cache_size,
                ),
            )
        return self._engine

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("ControlPlaneDatabase.init() has not been called")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        async with get_session(self.engine) as session:
            yield session

    @property
    def sync_engine(self) -> Engine:
        """Synchronous engine for Temporal activities running in thread pools.

        Converts the asyncpg URL to psycopg2 (sync driver).
        """
        if self._sync_engine is None:
            sync_url = self.settings.database_url.replace("+asyncpg", "")
            self._sync_engine = create_engine(sync_url, pool_pre_ping=True)
        return self._sync_engine

    async def dispose(self) -> None:
        """Dispose both engines. Call during shutdown."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        if self._sync_engine is not None:
            self._sync_engine.dispose()
            self._sync_engine = None
