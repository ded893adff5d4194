"""Workflow execution tracking activities."""

import asyncio
from dataclasses import dataclass

from sqlmodel import Session, select
from temporalio import activity

from src.controlplane.core.db.engine import ControlPlaneDatabase
from src.controlplane.models.base import utc_now
from src.controlplane.models.public import WorkflowExecution
from src.controlplane.models.public.workflow import TERMINAL_WORKFLOW_STATUSES


@dataclass
class UpdateWorkflowExecutionStatusInput:
    workflow_id: str
    status: str  # running, completed, failed
    error_message: str | None = None


class WorkflowExecutionActivities:
    def __init__(self, db: ControlPlaneDatabase):
        self.db = db

    def _sync_update_status(self, input: UpdateWorkflowExecutionStatusInput) -> bool:
        with Session(self.db.sync_engine) as session:
            execution = session.scalars(
                select(WorkflowExecution).where(WorkflowExecution.workflow_id == input.workflow_id)
            ).first()
            if not execution:
                return False

            execution.status = input.status
            if input.error_message:
                execution.error_message = input.error_message[:1000]
            if input.status in TERMINAL_WORKFLOW_STATUSES:
                execution.completed_at = utc_now()
            session.commit()
            return True

    @activity.defn
    async def update_workflow_execution_status(
        self, input: UpdateWorkflowExecutionStatusInput
    ) -> bool:
        """
        Record the final status of a workflow run.

        Idempotent: setting the same status again is a no-op.

        Returns:
            True if the execution row was updated, False if not found
        """
        result = await asyncio.to_thread(self._sync_update_status, input)
        if not result:
            activity.logger.error(f"Workflow execution {input.workflow_id} not found")
        else:
            activity.logger.info(
                f"Workflow execution {input.workflow_id} status updated to {input.status}"
            )
        return result
