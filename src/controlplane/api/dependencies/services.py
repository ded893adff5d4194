"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.controlplane.api.dependencies.db import Database, DBSession
from src.controlplane.api.dependencies.repositories import (
    BackupRepo,
    OrganizationRepo,
    ProjectRepo,
    SettingRepo,
    WorkflowExecRepo,
)
from src.controlplane.core.db import TenantDatabaseService
from src.controlplane.services import (
    BackupService,
    ColumnService,
    FunctionService,
    IndexService,
    ProjectPolicy,
    ProjectService,
    RowService,
    SettingService,
    StatsService,
    TableService,
    TenantConnectionFactory,
    WorkflowLauncher,
)


def get_tenant_database_service(database: Database) -> TenantDatabaseService:
    """Server-level tenant database operations over the control-plane engine."""
    return TenantDatabaseService(database.engine, database.settings)


TenantDatabases = Annotated[TenantDatabaseService, Depends(get_tenant_database_service)]


def get_connection_factory(
    database_service: TenantDatabases, project_repo: ProjectRepo
) -> TenantConnectionFactory:
    return TenantConnectionFactory(database_service, project_repo)


ConnectionFactory = Annotated[TenantConnectionFactory, Depends(get_connection_factory)]


def get_workflow_launcher(
    session: DBSession, workflow_exec_repo: WorkflowExecRepo, database: Database
) -> WorkflowLauncher:
    return WorkflowLauncher(session, workflow_exec_repo, database.settings)


Launcher = Annotated[WorkflowLauncher, Depends(get_workflow_launcher)]


def get_project_policy(organization_repo: OrganizationRepo) -> ProjectPolicy:
    return ProjectPolicy(organization_repo)


def get_project_service(
    project_repo: ProjectRepo,
    policy: Annotated[ProjectPolicy, Depends(get_project_policy)],
    database_service: TenantDatabases,
    launcher: Launcher,
    session: DBSession,
) -> ProjectService:
    return ProjectService(project_repo, policy, database_service, launcher, session)


def get_table_service(factory: ConnectionFactory) -> TableService:
    return TableService(factory)


def get_column_service(factory: ConnectionFactory) -> ColumnService:
    return ColumnService(factory)


def get_index_service(factory: ConnectionFactory) -> IndexService:
    return IndexService(factory)


def get_function_service(factory: ConnectionFactory) -> FunctionService:
    return FunctionService(factory)


def get_row_service(factory: ConnectionFactory) -> RowService:
    return RowService(factory)


def get_stats_service(factory: ConnectionFactory) -> StatsService:
    return StatsService(factory)


def get_backup_service(
    backup_repo: BackupRepo, launcher: Launcher, session: DBSession
) -> BackupService:
    return BackupService(backup_repo, launcher, session)


def get_setting_service(
    setting_repo: SettingRepo, session: DBSession, database: Database
) -> SettingService:
    return SettingService(setting_repo, session, database.settings)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
TableServiceDep = Annotated[TableService, Depends(get_table_service)]
ColumnServiceDep = Annotated[ColumnService, Depends(get_column_service)]
IndexServiceDep = Annotated[IndexService, Depends(get_index_service)]
FunctionServiceDep = Annotated[FunctionService, Depends(get_function_service)]
RowServiceDep = Annotated[RowService, Depends(get_row_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]
BackupServiceDep = Annotated[BackupService, Depends(get_backup_service)]
SettingServiceDep = Annotated[SettingService, Depends(get_setting_service)]
