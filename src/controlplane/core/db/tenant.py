"""Tenant database lifecycle and per-tenant connections."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import URL, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.db.engine import build_connect_args
from src.controlplane.core.logging import get_logger
from src.controlplane.core.security.validators import (
    owner_role_name,
    quote_ident,
    validate_database_name,
)

logger = get_logger(__name__)

USER_ROLE_PLACEHOLDER = "{{USER_ROLE}}"


class TenantConnection:
    """A pooled connection handle to one tenant database.

    The handle owns its engine; ``close()`` (or leaving ``async with``)
    releases every pooled connection.
    """

    def __init__(self, db_name: str, engine: AsyncEngine):
        self.db_name = db_name
        self.engine = engine

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator[AsyncConnection]:
        """Connection inside a transaction that commits on success."""
        async with self.engine.begin() as conn:
            yield conn

    @asynccontextmanager
    async def autocommit(self) -> AsyncGenerator[AsyncConnection]:
        async with self.engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            yield conn

    async def close(self) -> None:
        await self.engine.dispose()

    async def __aenter__(self) -> "TenantConnection":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def split_sql_statements(sql: str) -> list[str]:
    """Split a SQL script on top-level semicolons.

    Semicolons inside quoted strings, quoted identifiers, dollar-quoted
    bodies and comments do not end a statement. Empty statements are dropped.
    """
    statements: list[str] = []
    current: list[str] = []
    i = 0
    length = len(sql)
    while i < length:
        char = sql[i]
        if char == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            end = length if end == -1 else end
            current.append(sql[i:end])
            i = end
            continue
        if char == "/" and sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue
        if char in ("'", '"'):
            end = i + 1
            while end < length:
                if sql[end] == char:
                    if end + 1 < length and sql[end + 1] == char:
                        end += 2
                        continue
                    break
                end += 1
            current.append(sql[i : end + 1])
            i = end + 1
            continue
        if char == "$":
            close = sql.find("$", i + 1)
            tag = sql[i : close + 1] if close != -1 else ""
            if tag and (tag == "$$" or tag[1:-1].replace("_", "a").isalnum()):
                end = sql.find(tag, close + 1)
                end = length if end == -1 else end + len(tag)
                current.append(sql[i:end])
                i = end
                continue
        if char == ";":
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            i += 1
            continue
        current.append(char)
        i += 1

    statement = "".join(current).strip()
    if statement:
        statements.append(statement)
    return statements


class TenantDatabaseService:
    """Creates, drops and enumerates tenant databases on the shared server.

    Server-level statements go through the control-plane engine, which
    connects to the same PostgreSQL instance as the tenants.
    """

    def __init__(self, engine: AsyncEngine, settings: Settings | None = None):
        self.engine = engine
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def _admin_connection(self) -> AsyncGenerator[AsyncConnection]:
        # CREATE/DROP DATABASE cannot run inside a transaction block
        async with self.engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            yield conn

    async def create(self, name: str, owner_id: str | None = None) -> None:
        """Create a tenant database, then seed it when an owner is given.

        A failed CREATE DATABASE propagates; seed failures do not.
        """
        validate_database_name(name)
        async with self._admin_connection() as conn:
            await conn.execute(text(f"CREATE DATABASE {quote_ident(name)}"))
        logger.info("Tenant database created", action="create_database", db=name)

        if owner_id:
            await self.import_seed_files(name, owner_id)

    async def drop_if_exists(self, name: str, force: bool = False) -> None:
        """Drop a tenant database if present.

        With ``force`` the server terminates open connections first
        (the PostgREST container keeps a pool against every tenant).
        """
        validate_database_name(name)
        statement = f"DROP DATABASE IF EXISTS {quote_ident(name)}"
        if force:
            statement += " WITH (FORCE)"
        async with self._admin_connection() as conn:
            await conn.execute(text(statement))
        logger.info("Tenant database dropped", action="drop_database", db=name)

    async def recreate(self, name: str) -> None:
        """Drop and create; no seeding."""
        await self.drop_if_exists(name)
        await self.create(name)

    async def list_all(self) -> list[str]:
        async with self.engine.connect() as conn:
            result = await conn.execute(
                text("SELECT datname FROM pg_database WHERE datistemplate = false")
            )
            return [row[0] for row in result]

    async def exists(self, name: str) -> bool:
        async with self.engine.connect() as conn:
            result = await conn.execute(
                text("SELECT EXISTS (SELECT 1 FROM pg_database WHERE datname = :name)"),
                {"name": name},
            )
            return bool(result.scalar_one())

    def connect(self, name: str) -> TenantConnection:
        """Build a pooled connection handle for one tenant database.

        No connection is opened until the handle is first used.
        """
        validate_database_name(name)
        url = URL.create(
            "postgresql+asyncpg",
            username=self.settings.tenant_database_user,
            password=self.settings.tenant_database_password,
            host=self.settings.tenant_database_host,
            port=self.settings.tenant_database_port,
            database=name,
        )
        engine = create_async_engine(
            url,
            pool_size=self.settings.tenant_pool_size,
            max_overflow=self.settings.tenant_max_overflow,
            pool_recycle=self.settings.tenant_pool_recycle_seconds,
            pool_pre_ping=True,
            connect_args=build_connect_args(self.settings.tenant_database_ssl_mode),
        )
        return TenantConnection(name, engine)

    def seed_files(self) -> list[Path]:
        seed_dir = Path(self.settings.tenant_seed_dir)
        if not seed_dir.is_dir():
            logger.warning("Seed directory missing", action="seed", path=str(seed_dir))
            return []
        return sorted(seed_dir.glob("*.sql"))

    async def import_seed_files(self, name: str, owner_id: str) -> None:
        """Run every seed script against the tenant database, best effort.

        Files run in lexical order with ``{{USER_ROLE}}`` replaced by the
        owner's role. A failing statement is logged and skipped.
        """
        role = owner_role_name(owner_id)
        async with self.connect(name) as tenant:
            async with tenant.autocommit() as conn:
                for path in self.seed_files():
                    script = path.read_text().replace(USER_ROLE_PLACEHOLDER, role)
                    failures = 0
                    for statement in split_sql_statements(script):
                        try:
                            await conn.exec_driver_sql(statement)
                        except DBAPIError as e:
                            failures += 1
                            logger.warning(
                                "Seed statement failed",
                                action="seed",
                                db=name,
                                file=path.name,
                                error=str(e.orig),
                            )
                    logger.info(
                        "Seed file imported",
                        action="seed",
                        db=name,
                        file=path.name,
                        failures=failures,
                    )
