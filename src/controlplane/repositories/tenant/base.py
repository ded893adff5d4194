"""Base class for repositories that read and change a tenant's schema."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import RowMapping, text

from src.controlplane.core.db.tenant import TenantConnection


class TenantSchemaRepository:
    """Runs catalog queries and DDL against one tenant database.

    Each public method uses its own transaction; statements passed to
    ``_execute`` together either all apply or none do.
    """

    def __init__(self, connection: TenantConnection):
        self.connection = connection

    async def _fetch_all(self, sql: str, params: Mapping[str, Any] | None = None) -> list[RowMapping]:
        async with self.connection.begin() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            return list(result.mappings().all())

    async def _fetch_one(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> RowMapping | None:
        async with self.connection.begin() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            return result.mappings().first()

    async def _scalar(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        async with self.connection.begin() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            return result.scalar_one()

    async def _execute(self, *statements: str) -> None:
        """Run generated DDL in a single transaction."""
        async with self.connection.begin() as conn:
            for statement in statements:
                await conn.exec_driver_sql(statement)
