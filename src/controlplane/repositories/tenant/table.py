"""Table repository for a tenant database."""

from collections.abc import Sequence

from src.controlplane.core.exceptions import NotFoundError
from src.controlplane.core.security.validators import quote_ident
from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.ddl import (
    ColumnSpec,
    build_create_table,
    build_foreign_key_constraints,
    parse_table_name,
    qualified_name,
)
from src.controlplane.schemas.table import Table

_TABLE_COLUMNS = """
    SELECT
        c.oid::bigint AS id,
        c.relname::text AS name,
        n.nspname::text AS schema_name,
        GREATEST(c.reltuples, 0)::bigint AS estimated_rows,
        pg_size_pretty(pg_total_relation_size(c.oid)) AS total_size
    FROM pg_class c
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE c.relkind = 'r'
"""


class TableRepository(TenantSchemaRepository):
    async def exists(self, name: str) -> bool:
        schema, table = parse_table_name(name)
        return bool(
            await self._scalar(
                """
                SELECT EXISTS (
                    SELECT 1 FROM information_schema.tables
                    WHERE table_schema = :schema AND table_name = :table
                )
                """,
                {"schema": schema, "table": table},
            )
        )

    async def create(self, name: str, columns: Sequence[ColumnSpec]) -> None:
        """Create the table and its foreign keys in one transaction."""
        await self._execute(
            build_create_table(name, columns),
            *build_foreign_key_constraints(name, columns),
        )

    async def duplicate(self, existing: str, new: str) -> None:
        """Copy structure and rows into a new table (constraints are not copied)."""
        await self._execute(f"CREATE TABLE {qualified_name(new)} AS TABLE {qualified_name(existing)}")

    async def list_all(self, schema: str = "public") -> list[Table]:
        rows = await self._fetch_all(
            _TABLE_COLUMNS + " AND n.nspname = :schema ORDER BY c.relname",
            {"schema": schema},
        )
        return [Table.model_validate(dict(row)) for row in rows]

    async def get_by_name(self, name: str) -> Table:
        schema, table = parse_table_name(name)
        row = await self._fetch_one(
            _TABLE_COLUMNS + " AND n.nspname = :schema AND c.relname = :table",
            {"schema": schema, "table": table},
        )
        if row is None:
            raise NotFoundError("table.error.notFound")
        return Table.model_validate(dict(row))

    async def drop_if_exists(self, name: str) -> None:
        await self._execute(f"DROP TABLE IF EXISTS {qualified_name(name)}")

    async def rename(self, old: str, new: str) -> None:
        _, new_table = parse_table_name(new)
        await self._execute(f"ALTER TABLE {qualified_name(old)} RENAME TO {quote_ident(new_table)}")
