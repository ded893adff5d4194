"""Column management for tenant tables."""

from src.controlplane.core.exceptions import NotFoundError, UnprocessableError
from src.controlplane.schemas.column import (
    Column,
    ColumnRename,
    ColumnsAlterRequest,
    ColumnsCreateRequest,
)
from src.controlplane.services.table_service import require_table
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory


class ColumnService:
    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def list_columns(self, db_name: str, table: str) -> list[Column]:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            return await column_repo.list_all(table)

    async def create(self, db_name: str, table: str, data: ColumnsCreateRequest) -> list[Column]:
        """Add every requested column, or none of them if any already exists."""
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            if await column_repo.has_any(table, [c.name for c in data.columns]):
                raise UnprocessableError("column.error.someAlreadyExist")
            await column_repo.create_many(table, data.columns)
            return await column_repo.list_all(table)

    async def alter(self, db_name: str, table: str, data: ColumnsAlterRequest) -> list[Column]:
        """Change column types. All named columns must exist."""
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            if not await column_repo.has_all(table, [c.name for c in data.columns]):
                raise NotFoundError("column.error.notFound")
            await column_repo.alter_many(table, data.columns)
            return await column_repo.list_all(table)

    async def rename(self, db_name: str, table: str, column: str, data: ColumnRename) -> list[Column]:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            if not await column_repo.has(table, column):
                raise NotFoundError("column.error.notFound")
            if await column_repo.has(table, data.name):
                raise UnprocessableError("column.error.someAlreadyExist")
            await column_repo.rename(table, column, data.name)
            return await column_repo.list_all(table)

    async def delete(self, db_name: str, table: str, columns: list[str]) -> None:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            if not await column_repo.has_all(table, columns):
                raise NotFoundError("column.error.notFound")
            await column_repo.drop_many(table, columns)
