"""Index management for tenant tables."""

from src.controlplane.core.exceptions import NotFoundError, UnprocessableError
from src.controlplane.schemas.index import Index, IndexCreate
from src.controlplane.services.table_service import require_table
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory


class IndexService:
    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def list_indexes(self, db_name: str, table: str) -> list[Index]:
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        index_repo, _ = self.connection_factory.get_index_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            return await index_repo.list_all(table)

    async def get(self, db_name: str, table: str, name: str) -> Index:
        index_repo, conn = self.connection_factory.get_index_repo(db_name)
        async with conn:
            index = await index_repo.get_by_name(table, name)
        if index is None:
            raise NotFoundError("index.error.notFound")
        return index

    async def create(self, db_name: str, table: str, data: IndexCreate) -> Index:
        """
        Create an index after checking the name is free and the columns exist.

        The name check is a read before the write, not a lock: a concurrent
        request can still win, in which case the database's duplicate-object
        error propagates.
        """
        table_repo, conn = self.connection_factory.get_table_repo(db_name)
        index_repo, _ = self.connection_factory.get_index_repo(db_name, conn)
        column_repo, _ = self.connection_factory.get_column_repo(db_name, conn)
        async with conn:
            await require_table(table_repo, table)
            if await index_repo.has(table, data.name):
                raise UnprocessableError("index.error.alreadyExists")
            if not await column_repo.has_all(table, data.columns):
                raise NotFoundError("column.error.notFound")
            await index_repo.create(table, data)
            index = await index_repo.get_by_name(table, data.name)
        if index is None:
            raise NotFoundError("index.error.notFound")
        return index

    async def delete(self, db_name: str, table: str, name: str) -> None:
        index_repo, conn = self.connection_factory.get_index_repo(db_name)
        async with conn:
            if not await index_repo.has(table, name):
                raise NotFoundError("index.error.notFound")
            await index_repo.drop_if_exists(table, name)
