"""Row access for a tenant table.

Identifiers are quoted through ``quote_ident``; values are always bound
parameters. Each value is bound as text and cast to the column's catalog
type on the server, so JSON scalars reach date, uuid and json columns
without driver-side type coercion.
"""

import json
from collections.abc import Mapping
from typing import Any

from sqlalchemy import RowMapping

from src.controlplane.core.security.validators import quote_ident
from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.ddl import parse_table_name, qualified_name

_COLUMN_TYPES = """
    SELECT a.attname::text AS name, format_type(a.atttypid, a.atttypmod) AS type
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = :schema AND c.relname = :table
      AND a.attnum > 0 AND NOT a.attisdropped
    ORDER BY a.attnum
"""

_PRIMARY_KEY = """
    SELECT a.attname::text AS name
    FROM pg_index i
    JOIN pg_class c ON c.oid = i.indrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
    WHERE n.nspname = :schema AND c.relname = :table AND i.indisprimary
    ORDER BY array_position(i.indkey::int2[], a.attnum)
"""


def as_text(value: Any) -> str | None:
    """Render a JSON value as the text PostgreSQL will cast from."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class RowRepository(TenantSchemaRepository):
    async def column_types(self, name: str) -> dict[str, str]:
        """Column name to rendered type, in table order."""
        schema, table = parse_table_name(name)
        rows = await self._fetch_all(_COLUMN_TYPES, {"schema": schema, "table": table})
        return {row["name"]: row["type"] for row in rows}

    async def primary_key(self, name: str) -> list[str]:
        schema, table = parse_table_name(name)
        rows = await self._fetch_all(_PRIMARY_KEY, {"schema": schema, "table": table})
        return [row["name"] for row in rows]

    async def count(self, name: str) -> int:
        return int(await self._scalar(f"SELECT count(*) FROM {qualified_name(name)}"))

    async def list_rows(
        self,
        name: str,
        limit: int,
        offset: int = 0,
        order_by: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        sql = f"SELECT * FROM {qualified_name(name)}"
        if order_by:
            sql += " ORDER BY " + ", ".join(quote_ident(column) for column in order_by)
        rows = await self._fetch_all(sql + " LIMIT :limit OFFSET :offset", {"limit": limit, "offset": offset})
        return [dict(row) for row in rows]

    async def get(self, name: str, key: Mapping[str, Any], types: Mapping[str, str]) -> dict[str, Any] | None:
        where, params = _match(key, types)
        row = await self._fetch_one(f"SELECT * FROM {qualified_name(name)} WHERE {where}", params)
        return _as_dict(row)

    async def insert(self, name: str, values: Mapping[str, Any], types: Mapping[str, str]) -> dict[str, Any]:
        if not values:
            sql = f"INSERT INTO {qualified_name(name)} DEFAULT VALUES RETURNING *"
            params: dict[str, Any] = {}
        else:
            columns = ", ".join(quote_ident(column) for column in values)
            placeholders, params = _bind(values, types, "v")
            sql = (
                f"INSERT INTO {qualified_name(name)} ({columns}) "
                f"VALUES ({', '.join(placeholders)}) RETURNING *"
            )
        row = await self._fetch_one(sql, params)
        return dict(row)  # type: ignore[arg-type]

    async def update(
        self,
        name: str,
        key: Mapping[str, Any],
        values: Mapping[str, Any],
        types: Mapping[str, str],
    ) -> dict[str, Any] | None:
        placeholders, params = _bind(values, types, "v")
        assignments = ", ".join(
            f"{quote_ident(column)} = {placeholder}" for column, placeholder in zip(values, placeholders)
        )
        where, key_params = _match(key, types)
        row = await self._fetch_one(
            f"UPDATE {qualified_name(name)} SET {assignments} WHERE {where} RETURNING *",
            params | key_params,
        )
        return _as_dict(row)

    async def delete(self, name: str, key: Mapping[str, Any], types: Mapping[str, str]) -> bool:
        where, params = _match(key, types)
        row = await self._fetch_one(
            f"DELETE FROM {qualified_name(name)} WHERE {where} RETURNING 1 AS deleted", params
        )
        return row is not None


def _bind(
    values: Mapping[str, Any], types: Mapping[str, str], prefix: str
) -> tuple[list[str], dict[str, Any]]:
    placeholders: list[str] = []
    params: dict[str, Any] = {}
    for i, (column, value) in enumerate(values.items()):
        param = f"{prefix}{i}"
        placeholders.append(f"CAST(CAST(:{param} AS text) AS {types[column]})")
        params[param] = as_text(value)
    return placeholders, params


def _match(key: Mapping[str, Any], types: Mapping[str, str]) -> tuple[str, dict[str, Any]]:
    placeholders, params = _bind(key, types, "k")
    where = " AND ".join(
        f"{quote_ident(column)} = {placeholder}" for column, placeholder in zip(key, placeholders)
    )
    return where, params


def _as_dict(row: RowMapping | None) -> dict[str, Any] | None:
    return dict(row) if row is not None else None
