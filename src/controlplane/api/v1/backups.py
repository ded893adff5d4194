"""Backup endpoints.

Create and delete return as soon as the workflow is queued; poll
``GET /backups/{backup_id}`` for the outcome.
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.controlplane.api.dependencies import BackupServiceDep, CurrentProject, WritableProject
from src.controlplane.schemas.backup import BackupRead, BackupWorkflowResponse

router = APIRouter(prefix="/backups", tags=["backups"])


@router.get("", response_model=list[BackupRead], summary="List backups")
async def list_backups(project: CurrentProject, service: BackupServiceDep) -> list[BackupRead]:
    backups = await service.list_backups(project)
    return [BackupRead.model_validate(b) for b in backups]


@router.get(
    "/{backup_id}",
    response_model=BackupRead,
    summary="Get backup",
    responses={404: {"description": "Backup not found"}},
)
async def get_backup(
    backup_id: UUID, project: CurrentProject, service: BackupServiceDep
) -> BackupRead:
    backup = await service.get(project, backup_id)
    return BackupRead.model_validate(backup)


@router.post(
    "",
    response_model=BackupWorkflowResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Create backup",
    responses={
        202: {
            "description": "Backup queued",
            "content": {
                "application/json": {
                    "example": {
                        "backup": {
                            "id": "550e8400-e29b-41d4-a716-446655440000",
                            "project_id": "6fa459ea-ee8a-3ca4-894e-db77e160355e",
                            "status": "creating",
                            "error": None,
                            "started_at": "2026-01-20T14:45:00Z",
                            "completed_at": None,
                        },
                        "workflow_id": "backup-create-550e8400-e29b-41d4-a716-446655440000",
                    }
                }
            },
        }
    },
)
async def create_backup(
    project: WritableProject, service: BackupServiceDep
) -> BackupWorkflowResponse:
    backup, workflow_id = await service.create(project)
    return BackupWorkflowResponse(backup=BackupRead.model_validate(backup), workflow_id=workflow_id)


@router.delete(
    "/{backup_id}",
    response_model=BackupWorkflowResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete backup",
    responses={
        400: {"description": "Backup is still being created or already being deleted"},
        404: {"description": "Backup not found"},
    },
)
async def delete_backup(
    backup_id: UUID, project: WritableProject, service: BackupServiceDep
) -> BackupWorkflowResponse:
    backup, workflow_id = await service.delete(project, backup_id)
    return BackupWorkflowResponse(backup=BackupRead.model_validate(backup), workflow_id=workflow_id)
