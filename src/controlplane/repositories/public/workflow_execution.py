"""Repository for durable workflow run records."""

from src.controlplane.models.base import utc_now
from src.controlplane.models.public import WorkflowExecution
from src.controlplane.repositories.base import BaseRepository


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    model = WorkflowExecution

    @staticmethod
    def mark_running(execution: WorkflowExecution) -> None:
        execution.status = "running"
        execution.started_at = utc_now()
