"""Backup model - status row driven by the backup workflows."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.controlplane.models.base import utc_now
from src.controlplane.models.enums import BackupStatus


class Backup(SQLModel, table=True):
    __tablename__ = "backups"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="public.projects.id", index=True, ondelete="CASCADE")
    status: str = Field(default=BackupStatus.CREATING.value, max_length=20)
    error: str | None = Field(default=None, max_length=2000)
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = Field(default=None)

    @property
    def status_enum(self) -> BackupStatus:
        """Get status as BackupStatus enum."""
        return BackupStatus(self.status)

    @property
    def is_deleting(self) -> bool:
        return self.status == BackupStatus.DELETING.value
