"""Index repository for a tenant database."""

from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.ddl import (
    build_create_index,
    parse_table_name,
    qualified_name,
)
from src.controlplane.schemas.index import Index, IndexCreate

_INDEX_COLUMNS = """
    SELECT
        i.relname::text AS name,
        t.relname::text AS table_name,
        ix.indisunique AS "unique",
        array_agg(a.attname::text ORDER BY k.ord) AS columns,
        pg_get_indexdef(ix.indexrelid) AS definition
    FROM pg_index ix
    JOIN pg_class i ON i.oid = ix.indexrelid
    JOIN pg_class t ON t.oid = ix.indrelid
    JOIN pg_namespace n ON n.oid = t.relnamespace
    CROSS JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS k(attnum, ord)
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
    WHERE n.nspname = :schema AND t.relname = :table
"""

_INDEX_GROUP = " GROUP BY i.relname, t.relname, ix.indisunique, ix.indexrelid"


class IndexRepository(TenantSchemaRepository):
    async def get_by_name(self, table: str, name: str) -> Index | None:
        schema, table_name = parse_table_name(table)
        row = await self._fetch_one(
            _INDEX_COLUMNS + " AND i.relname = :name" + _INDEX_GROUP,
            {"schema": schema, "table": table_name, "name": name},
        )
        return Index.model_validate(dict(row)) if row is not None else None

    async def has(self, table: str, name: str) -> bool:
        schema, table_name = parse_table_name(table)
        return bool(
            await self._scalar(
                """
                SELECT EXISTS (
                    SELECT 1 FROM pg_indexes
                    WHERE schemaname = :schema AND tablename = :table AND indexname = :name
                )
                """,
                {"schema": schema, "table": table_name, "name": name},
            )
        )

    async def list_all(self, table: str) -> list[Index]:
        schema, table_name = parse_table_name(table)
        rows = await self._fetch_all(
            _INDEX_COLUMNS + _INDEX_GROUP + " ORDER BY i.relname",
            {"schema": schema, "table": table_name},
        )
        return [Index.model_validate(dict(row)) for row in rows]

    async def create(self, table: str, index: IndexCreate) -> None:
        await self._execute(build_create_index(table, index.name, index.columns, index.unique))

    async def drop_if_exists(self, table: str, name: str) -> None:
        # Indexes live in the table's schema
        schema, _ = parse_table_name(table)
        await self._execute(f"DROP INDEX IF EXISTS {qualified_name(f'{schema}.{name}')}")
