"""Column repository for a tenant database."""

from collections.abc import Sequence

from src.controlplane.core.security.validators import quote_ident
from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.ddl import (
    ColumnSpec,
    build_add_columns,
    build_alter_column_type,
    build_drop_columns,
    build_foreign_key_constraints,
    parse_table_name,
    qualified_name,
)
from src.controlplane.schemas.column import Column, ColumnAlter

_LIST_COLUMNS = """
    SELECT
        a.attname::text AS name,
        a.attnum::int AS position,
        a.attnotnull AS not_null,
        format_type(a.atttypid, a.atttypmod) AS type,
        pg_get_expr(d.adbin, d.adrelid) AS default_value,
        COALESCE(bool_or(con.contype = 'p'), false) AS "primary",
        COALESCE(bool_or(con.contype = 'u'), false) AS "unique",
        COALESCE(bool_or(con.contype = 'f'), false) AS "foreign",
        max(ref_table.relname::text) FILTER (WHERE con.contype = 'f') AS reference_table,
        max(ref_attr.attname::text) FILTER (WHERE con.contype = 'f') AS reference_column
    FROM pg_attribute a
    JOIN pg_class t ON t.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = t.relnamespace
    LEFT JOIN pg_attrdef d ON d.adrelid = a.attrelid AND d.adnum = a.attnum
    LEFT JOIN pg_constraint con
        ON con.conrelid = a.attrelid AND a.attnum = ANY(con.conkey)
    LEFT JOIN pg_class ref_table ON ref_table.oid = con.confrelid
    LEFT JOIN pg_attribute ref_attr
        ON ref_attr.attrelid = con.confrelid
        AND ref_attr.attnum = con.confkey[array_position(con.conkey, a.attnum)]
    WHERE n.nspname = :schema
        AND t.relname = :table
        AND a.attnum > 0
        AND NOT a.attisdropped
    GROUP BY a.attname, a.attnum, a.attnotnull, a.atttypid, a.atttypmod, d.adbin, d.adrelid
    ORDER BY a.attnum
"""

_COUNT_COLUMNS = """
    SELECT COUNT(*)
    FROM information_schema.columns
    WHERE table_schema = :schema
        AND table_name = :table
        AND column_name::text = ANY(CAST(:names AS text[]))
"""


class ColumnRepository(TenantSchemaRepository):
    async def list_all(self, table: str) -> list[Column]:
        schema, name = parse_table_name(table)
        rows = await self._fetch_all(_LIST_COLUMNS, {"schema": schema, "table": name})
        return [Column.model_validate(dict(row)) for row in rows]

    async def _count_existing(self, table: str, names: Sequence[str]) -> int:
        schema, name = parse_table_name(table)
        return int(
            await self._scalar(
                _COUNT_COLUMNS, {"schema": schema, "table": name, "names": list(names)}
            )
        )

    async def has(self, table: str, column: str) -> bool:
        return await self._count_existing(table, [column]) > 0

    async def has_any(self, table: str, columns: Sequence[str]) -> bool:
        """True if at least one of the names exists. One catalog query."""
        if not columns:
            return False
        return await self._count_existing(table, columns) > 0

    async def has_all(self, table: str, columns: Sequence[str]) -> bool:
        """True if every distinct name exists. One catalog query."""
        unique = set(columns)
        if not unique:
            return True
        return await self._count_existing(table, sorted(unique)) == len(unique)

    async def create_many(self, table: str, columns: Sequence[ColumnSpec]) -> None:
        """Add the columns and any foreign keys in one transaction."""
        await self._execute(
            build_add_columns(table, columns),
            *build_foreign_key_constraints(table, columns),
        )

    async def alter_many(self, table: str, columns: Sequence[ColumnAlter]) -> None:
        await self._execute(
            *(build_alter_column_type(table, c.name, c.type) for c in columns)
        )

    async def rename(self, table: str, old: str, new: str) -> None:
        await self._execute(
            f"ALTER TABLE {qualified_name(table)} "
            f"RENAME COLUMN {quote_ident(old)} TO {quote_ident(new)}"
        )

    async def drop_many(self, table: str, columns: Sequence[str]) -> None:
        await self._execute(build_drop_columns(table, columns))
