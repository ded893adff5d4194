"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.controlplane.api.dependencies.db import DBSession
from src.controlplane.repositories import (
    BackupRepository,
    OrganizationRepository,
    ProjectRepository,
    SettingRepository,
    WorkflowExecutionRepository,
)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_backup_repository(session: DBSession) -> BackupRepository:
    return BackupRepository(session)


def get_setting_repository(session: DBSession) -> SettingRepository:
    return SettingRepository(session)


def get_organization_repository(session: DBSession) -> OrganizationRepository:
    return OrganizationRepository(session)


def get_workflow_execution_repository(session: DBSession) -> WorkflowExecutionRepository:
    return WorkflowExecutionRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
BackupRepo = Annotated[BackupRepository, Depends(get_backup_repository)]
SettingRepo = Annotated[SettingRepository, Depends(get_setting_repository)]
OrganizationRepo = Annotated[OrganizationRepository, Depends(get_organization_repository)]
WorkflowExecRepo = Annotated[
    WorkflowExecutionRepository, Depends(get_workflow_execution_repository)
]
