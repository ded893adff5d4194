"""Repository for Backup entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.controlplane.models.public import Backup, BackupStatus
from src.controlplane.repositories.base import BaseRepository


DELETABLE_STATUSES = (
    BackupStatus.CREATED.value,
    BackupStatus.CREATING_FAILED.value,
    BackupStatus.DELETING_FAILED.value,
)


class BackupRepository(BaseRepository[Backup]):
    """Repository for Backup entity in public schema."""

    model = Backup

    async def list_for_project(self, project_id: UUID) -> list[Backup]:
        """List backups for a project, newest first."""
        result = await self.session.execute(
            select(Backup)
            .where(Backup.project_id == project_id)
            .order_by(Backup.started_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        backup_id: UUID,
        status: str,
        error: str | None = None,
        completed_at: datetime | None = None,
    ) -> bool:
        result = await self.session.execute(
            update(Backup)
            .where(Backup.id == backup_id)  # type: ignore[arg-type]
            .values(status=status, error=error, completed_at=completed_at)
        )
        return result.rowcount > 0

    async def mark_deleting(self, backup_id: UUID) -> bool:
        """Move a finished backup into `deleting`.

        A single conditional UPDATE, so two concurrent delete requests
        cannot both succeed. Backups still `creating` or already `deleting`
        are left alone. Returns False when the guard rejected the change.
        """
        result = await self.session.execute(
            update(Backup)
            .where(
                Backup.id == backup_id,  # type: ignore[arg-type]
                Backup.status.in_(DELETABLE_STATUSES),  # type: ignore[attr-defined]
            )
            .values(status=BackupStatus.DELETING.value, error=None)
        )
        return result.rowcount > 0
