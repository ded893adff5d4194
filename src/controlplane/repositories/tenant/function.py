"""Stored function repository for a tenant database."""

from src.controlplane.core.exceptions import NotFoundError
from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.ddl import build_create_function, build_drop_function
from src.controlplane.schemas.function import Function, FunctionCreate

_LIST_FUNCTIONS = """
    SELECT
        routine_name::text AS name,
        routine_type::text AS type,
        data_type::text AS data_type,
        type_udt_name::text AS type_udt_name,
        routine_definition::text AS definition,
        external_language::text AS language,
        sql_data_access::text AS sql_data_access
    FROM information_schema.routines
    WHERE routine_type = 'FUNCTION' AND specific_schema = :schema
    ORDER BY routine_name
"""

_GET_FUNCTION = """
    SELECT
        r.routine_name::text AS name,
        r.routine_type::text AS type,
        r.data_type::text AS data_type,
        r.type_udt_name::text AS type_udt_name,
        pg_get_functiondef(p.oid) AS definition,
        r.external_language::text AS language,
        r.sql_data_access::text AS sql_data_access
    FROM information_schema.routines r
    JOIN pg_namespace n ON n.nspname = r.specific_schema
    JOIN pg_proc p
        ON p.pronamespace = n.oid
        AND r.specific_name = p.proname || '_' || p.oid
    WHERE r.routine_type = 'FUNCTION'
        AND r.specific_schema = :schema
        AND r.routine_name = :name
    LIMIT 1
"""


class FunctionRepository(TenantSchemaRepository):
    async def list_all(self, schema: str = "public") -> list[Function]:
        rows = await self._fetch_all(_LIST_FUNCTIONS, {"schema": schema})
        return [Function.model_validate(dict(row)) for row in rows]

    async def get_by_name(self, schema: str, name: str) -> Function:
        row = await self._fetch_one(_GET_FUNCTION, {"schema": schema, "name": name})
        if row is None:
            raise NotFoundError("function.error.notFound")
        return Function.model_validate(dict(row))

    async def create(self, schema: str, function: FunctionCreate) -> Function:
        """Create or replace the function, then read it back from the catalog."""
        await self._execute(
            build_create_function(
                schema,
                function.name,
                function.parameters,
                function.return_type,
                function.definition,
                function.language,
            )
        )
        return await self.get_by_name(schema, function.name)

    async def delete(self, schema: str, name: str) -> None:
        await self._execute(build_drop_function(schema, name))
