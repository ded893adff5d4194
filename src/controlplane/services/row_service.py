"""Row reads and writes against a project's tenant tables."""

from typing import Any

from src.controlplane.core.exceptions import NotFoundError, UnprocessableError
from src.controlplane.repositories.tenant import RowRepository
from src.controlplane.schemas.row import RowCreate, RowPage, RowUpdate
from src.controlplane.services.table_service import require_table
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory


def reject_unknown_columns(types: dict[str, str], values: dict[str, Any]) -> None:
    if any(column not in types for column in values):
        raise UnprocessableError("row.error.unknownColumn")


async def single_key(repo: RowRepository, table: str, key: str) -> dict[str, str]:
    """Map a path key onto the table's primary key column.

    Raises:
        UnprocessableError: If the table has no primary key, or a composite one
    """
    primary_key = await repo.primary_key(table)
    if len(primary_key) != 1:
        raise UnprocessableError("row.error.singleColumnKeyRequired")
    return {primary_key[0]: key}


class RowService:
    """Row access by primary key. Values are bound, never interpolated."""

    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def list_rows(self, db_name: str, table: str, limit: int, offset: int = 0) -> RowPage:
        """A page of rows, in primary key order when the table has one."""
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        row_repo, _ = self.connection_factory.get_row_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            order_by = await row_repo.primary_key(table)
            items = await row_repo.list_rows(table, limit, offset, order_by)
            total = await row_repo.count(table)
        return RowPage(items=items, total=total, limit=limit, offset=offset)

    async def get(self, db_name: str, table: str, key: str) -> dict[str, Any]:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        row_repo, _ = self.connection_factory.get_row_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            match = await single_key(row_repo, table, key)
            row = await row_repo.get(table, match, await row_repo.column_types(table))
        if row is None:
            raise NotFoundError("row.error.notFound")
        return row

    async def create(self, db_name: str, table: str, data: RowCreate) -> dict[str, Any]:
        """Insert one row and return it as stored, defaults included.

        Constraint and cast failures come back from the database unchanged.
        """
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        row_repo, _ = self.connection_factory.get_row_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            types = await row_repo.column_types(table)
            reject_unknown_columns(types, data.values)
            return await row_repo.insert(table, data.values, types)

    async def update(self, db_name: str, table: str, key: str, data: RowUpdate) -> dict[str, Any]:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        row_repo, _ = self.connection_factory.get_row_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            types = await row_repo.column_types(table)
            reject_unknown_columns(types, data.values)
            match = await single_key(row_repo, table, key)
            row = await row_repo.update(table, match, data.values, types)
        if row is None:
            raise NotFoundError("row.error.notFound")
        return row

    async def delete(self, db_name: str, table: str, key: str) -> None:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        row_repo, _ = self.connection_factory.get_row_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            match = await single_key(row_repo, table, key)
            deleted = await row_repo.delete(table, match, await row_repo.column_types(table))
        if not deleted:
            raise NotFoundError("row.error.notFound")
