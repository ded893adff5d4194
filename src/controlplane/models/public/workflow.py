"""Workflow execution tracking model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.controlplane.models.base import utc_now

TERMINAL_WORKFLOW_STATUSES = ("completed", "failed")


class WorkflowExecution(SQLModel, table=True):
    """Links a durable Temporal run to the project or backup it acts on."""

    __tablename__ = "workflow_executions"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workflow_id: str = Field(max_length=255, unique=True, index=True)
    workflow_type: str = Field(max_length=100)
    entity_type: str = Field(max_length=50)  # "project", "backup"
    entity_id: UUID = Field(index=True)
    status: str = Field(default="pending", max_length=20)  # pending, running, completed, failed
    error_message: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_WORKFLOW_STATUSES
