"""FastAPI dependency injection definitions.

Re-exports all dependencies so routers import from one place.
"""

from src.controlplane.api.dependencies.auth import CurrentUserID, get_current_user_id
from src.controlplane.api.dependencies.db import (
    Database,
    DBSession,
    get_database,
    get_db_session,
)
from src.controlplane.api.dependencies.project import (
    CurrentProject,
    WritableProject,
    get_current_project,
    get_project_id_from_header,
    get_writable_project,
)
from src.controlplane.api.dependencies.repositories import (
    BackupRepo,
    OrganizationRepo,
    ProjectRepo,
    SettingRepo,
    WorkflowExecRepo,
)
from src.controlplane.api.dependencies.services import (
    BackupServiceDep,
    ColumnServiceDep,
    ConnectionFactory,
    FunctionServiceDep,
    IndexServiceDep,
    Launcher,
    ProjectServiceDep,
    RowServiceDep,
    SettingServiceDep,
    StatsServiceDep,
    TableServiceDep,
    TenantDatabases,
)

__all__ = [
    # Database
    "Database",
    "DBSession",
    "get_database",
    "get_db_session",
    # Auth
    "CurrentUserID",
    "get_current_user_id",
    # Project
    "CurrentProject",
    "WritableProject",
    "get_current_project",
    "get_project_id_from_header",
    "get_writable_project",
    # Repositories
    "BackupRepo",
    "OrganizationRepo",
    "ProjectRepo",
    "SettingRepo",
    "WorkflowExecRepo",
    # Services
    "BackupServiceDep",
    "ColumnServiceDep",
    "ConnectionFactory",
    "FunctionServiceDep",
    "IndexServiceDep",
    "Launcher",
    "ProjectServiceDep",
    "RowServiceDep",
    "SettingServiceDep",
    "StatsServiceDep",
    "TableServiceDep",
    "TenantDatabases",
]
