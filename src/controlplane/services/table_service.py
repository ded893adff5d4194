"""Table management against a project's tenant database."""

from src.controlplane.core.exceptions import NotFoundError, UnprocessableError
from src.controlplane.repositories.tenant import TableRepository
from src.controlplane.schemas.table import Table, TableCreate, TableDuplicate, TableRename
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory


async def require_table(repo: TableRepository, name: str) -> None:
    if not await repo.exists(name):
        raise NotFoundError("table.error.notFound")


async def reject_existing_table(repo: TableRepository, name: str) -> None:
    if await repo.exists(name):
        raise UnprocessableError("table.error.alreadyExists")


class TableService:
    """Each call opens one tenant connection and closes it before returning."""

    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def list_tables(self, db_name: str, schema: str = "public") -> list[Table]:
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            return await repo.list_all(schema)

    async def get(self, db_name: str, name: str) -> Table:
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            return await repo.get_by_name(name)

    async def create(self, db_name: str, data: TableCreate) -> Table:
        """Create the table with its columns; foreign keys fail or succeed with it."""
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            await reject_existing_table(repo, data.name)
            await repo.create(data.name, data.columns)
            return await repo.get_by_name(data.name)

    async def rename(self, db_name: str, name: str, data: TableRename) -> Table:
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            await require_table(repo, name)
            await reject_existing_table(repo, data.name)
            await repo.rename(name, data.name)
            return await repo.get_by_name(data.name)

    async def duplicate(self, db_name: str, name: str, data: TableDuplicate) -> Table:
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            await require_table(repo, name)
            await reject_existing_table(repo, data.name)
            await repo.duplicate(name, data.name)
            return await repo.get_by_name(data.name)

    async def delete(self, db_name: str, name: str) -> None:
        repo, conn = self.connection_factory.get_table_repo(db_name)
        async with conn:
            await require_table(repo, name)
            await repo.drop_if_exists(name)
