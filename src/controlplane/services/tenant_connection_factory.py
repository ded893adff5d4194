"""Builds schema repositories bound to a tenant database."""

from typing import TypeVar
from uuid import UUID

from src.controlplane.core.db.tenant import TenantConnection, TenantDatabaseService
from src.controlplane.core.exceptions import NotFoundError
from src.controlplane.repositories.public import ProjectRepository
from src.controlplane.repositories.tenant import (
    ColumnRepository,
    FunctionRepository,
    IndexRepository,
    RowRepository,
    StatsRepository,
    TableRepository,
    TenantSchemaRepository,
)

RepoType = TypeVar("RepoType", bound=TenantSchemaRepository)


class TenantConnectionFactory:
    """Resolves projects to tenant databases and hands out bound repositories.

    Every ``get_*_repo`` call returns the repository together with the
    connection it uses. Passing that connection into the next call shares
    it; omitting it opens a new one. The caller closes what it opened.
    """

    def __init__(self, database_service: TenantDatabaseService, project_repo: ProjectRepository):
        self.database_service = database_service
        self.project_repo = project_repo

    async def resolve_db_name(self, project_id: UUID) -> str:
        db_name = await self.project_repo.get_db_name_by_id(project_id)
        if db_name is None:
            raise NotFoundError("project.error.notFound")
        return db_name

    def connect(self, db_name: str, connection: TenantConnection | None = None) -> TenantConnection:
        return connection if connection is not None else self.database_service.connect(db_name)

    async def connect_by_project(self, project_id: UUID) -> TenantConnection:
        return self.database_service.connect(await self.resolve_db_name(project_id))

    def _repo(
        self,
        repo_class: type[RepoType],
        db_name: str,
        connection: TenantConnection | None,
    ) -> tuple[RepoType, TenantConnection]:
        conn = self.connect(db_name, connection)
        return repo_class(conn), conn

    def get_table_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[TableRepository, TenantConnection]:
        return self._repo(TableRepository, db_name, connection)

    def get_column_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[ColumnRepository, TenantConnection]:
        return self._repo(ColumnRepository, db_name, connection)

    def get_index_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[IndexRepository, TenantConnection]:
        return self._repo(IndexRepository, db_name, connection)

    def get_function_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[FunctionRepository, TenantConnection]:
        return self._repo(FunctionRepository, db_name, connection)

    def get_row_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[RowRepository, TenantConnection]:
        return self._repo(RowRepository, db_name, connection)

    def get_stats_repo(
        self, db_name: str, connection: TenantConnection | None = None
    ) -> tuple[StatsRepository, TenantConnection]:
        return self._repo(StatsRepository, db_name, connection)
