"""Backup requests: rows in the control plane, work on the backup queue."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.controlplane.core.exceptions import BadRequestError, NotFoundError
from src.controlplane.core.logging import get_logger
from src.controlplane.models.public import Backup, BackupStatus, Project
from src.controlplane.repositories import BackupRepository
from src.controlplane.services.project_service import project_ctx
from src.controlplane.services.workflow_launcher import WorkflowLauncher, unique_workflow_id
from src.controlplane.temporal.context import BackupCtx
from src.controlplane.temporal.routing import QueueKind
from src.controlplane.temporal.workflows import BackupCreationWorkflow, BackupDeletionWorkflow

logger = get_logger(__name__)


class BackupService:
    """Backup lifecycle service.

    Request handlers only insert or guard the row and start the workflow;
    outcomes are read back later through ``get``.
    """

    def __init__(
        self,
        backup_repo: BackupRepository,
        launcher: WorkflowLauncher,
        session: AsyncSession,
    ):
        self.backup_repo = backup_repo
        self.launcher = launcher
        self.session = session

    async def list_backups(self, project: Project) -> list[Backup]:
        return await self.backup_repo.list_for_project(project.id)

    async def get(self, project: Project, backup_id: UUID) -> Backup:
        backup = await self.backup_repo.get_by_id(backup_id)
        if backup is None or backup.project_id != project.id:
            raise NotFoundError("backup.error.notFound")
        return backup

    async def create(self, project: Project) -> tuple[Backup, str]:
        """
        Insert a ``creating`` backup and start the creation workflow.

        If the workflow cannot be started the row is marked
        ``creating_failed`` before the error propagates.

        Returns:
            Tuple of (backup, workflow_id)
        """
        backup = Backup(project_id=project.id, status=BackupStatus.CREATING.value)
        self.backup_repo.add(backup)
        await self.session.commit()
        await self.session.refresh(backup)

        ctx = BackupCtx(backup_id=str(backup.id), project=project_ctx(project))
        try:
            workflow_id = await self.launcher.start(
                BackupCreationWorkflow.run,
                [ctx],
                workflow_id=f"backup-create-{backup.id}",
                workflow_type="BackupCreationWorkflow",
                entity_type="backup",
                entity_id=backup.id,
                project_id=project.id,
                kind=QueueKind.BACKUP,
            )
        except Exception as e:
            await self.backup_repo.update_status(
                backup.id, BackupStatus.CREATING_FAILED.value, error=str(e)[:2000]
            )
            await self.session.commit()
            raise

        logger.info(
            "Backup queued",
            action="backup",
            db=project.db_name,
            backup_uuid=str(backup.id),
            status=backup.status,
        )
        return backup, workflow_id

    async def delete(self, project: Project, backup_id: UUID) -> tuple[Backup, str]:
        """
        Move the backup to ``deleting`` and start the deletion workflow.

        Raises:
            NotFoundError: If the backup does not belong to the project
            BadRequestError: If the backup is still being created or already being deleted

        Returns:
            Tuple of (backup, workflow_id)
        """
        backup = await self.get(project, backup_id)
        if backup.status == BackupStatus.CREATING.value:
            raise BadRequestError("backup.error.createInProgress")
        if backup.is_deleting or not await self.backup_repo.mark_deleting(backup.id):
            await self.session.rollback()
            raise BadRequestError("backup.error.deleteInProgress")
        await self.session.commit()
        await self.session.refresh(backup)

        ctx = BackupCtx(backup_id=str(backup.id), project=project_ctx(project))
        workflow_id = await self.launcher.start(
            BackupDeletionWorkflow.run,
            [ctx],
            workflow_id=unique_workflow_id("backup-delete", backup.id),
            workflow_type="BackupDeletionWorkflow",
            entity_type="backup",
            entity_id=backup.id,
            project_id=project.id,
            kind=QueueKind.BACKUP,
        )
        return backup, workflow_id
