"""Backup schemas for API responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class BackupRead(BaseModel):
    id: UUID
    project_id: UUID
    status: str
    error: str | None = None
    started_at: datetime
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class BackupWorkflowResponse(BaseModel):
    """The backup row as queued, plus the workflow that will drive it."""

    backup: BackupRead
    workflow_id: str
