"""Database functions in a project's tenant database."""

from src.controlplane.schemas.function import Function, FunctionCreate
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory


class FunctionService:
    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def list_functions(self, db_name: str, schema: str = "public") -> list[Function]:
        repo, conn = self.connection_factory.get_function_repo(db_name)
        async with conn:
            return await repo.list_all(schema)

    async def get(self, db_name: str, name: str, schema: str = "public") -> Function:
        repo, conn = self.connection_factory.get_function_repo(db_name)
        async with conn:
            return await repo.get_by_name(schema, name)

    async def create(self, db_name: str, data: FunctionCreate, schema: str = "public") -> Function:
        """Create or replace; an existing function with the same signature is overwritten."""
        repo, conn = self.connection_factory.get_function_repo(db_name)
        async with conn:
            return await repo.create(schema, data)

    async def delete(self, db_name: str, name: str, schema: str = "public") -> None:
        repo, conn = self.connection_factory.get_function_repo(db_name)
        async with conn:
            await repo.get_by_name(schema, name)
            await repo.delete(schema, name)
