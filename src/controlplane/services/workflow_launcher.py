"""Hands long-running work to Temporal and tracks it in workflow_executions."""

from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession
from temporalio.client import Client

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.logging import get_logger
from src.controlplane.models.public import WorkflowExecution
from src.controlplane.repositories import WorkflowExecutionRepository
from src.controlplane.temporal.client import get_temporal_client
from src.controlplane.temporal.routing import QueueKind, route_for_project

logger = get_logger(__name__)

ClientProvider = Callable[[], Awaitable[Client]]


def unique_workflow_id(kind: str, key: str | UUID) -> str:
    """Workflow id for operations that may legitimately run again (restarts, retried deletes)."""
    return f"{kind}-{key}-{uuid4().hex[:8]}"


class WorkflowLauncher:
    """Starts project-scoped workflows.

    The execution row is committed before the workflow starts, so the
    tracking record exists even if the start call itself fails.
    """

    def __init__(
        self,
        session: AsyncSession,
        workflow_exec_repo: WorkflowExecutionRepository,
        settings: Settings | None = None,
        client_provider: ClientProvider = get_temporal_client,
    ):
        self.session = session
        self.workflow_exec_repo = workflow_exec_repo
        self.settings = settings or get_settings()
        self.client_provider = client_provider

    async def start(
        self,
        workflow_run: Callable[..., Awaitable[Any]],
        args: list[Any],
        *,
        workflow_id: str,
        workflow_type: str,
        entity_type: str,
        entity_id: UUID,
        project_id: UUID,
        kind: QueueKind,
    ) -> str:
        """
        Record and start a workflow on the project's task queue.

        Args:
            workflow_run: The workflow's run method (e.g. BackupCreationWorkflow.run)
            args: Positional workflow arguments
            workflow_id: Temporal workflow id
            workflow_type: Workflow class name, stored for tracking
            entity_type: "project" or "backup"
            entity_id: Id of the entity the workflow acts on
            project_id: Owning project, used for queue routing and fairness
            kind: Queue kind the workflow is registered on

        Returns:
            The workflow id
        """
        workflow_exec = WorkflowExecution(
            workflow_id=workflow_id,
            workflow_type=workflow_type,
            entity_type=entity_type,
            entity_id=entity_id,
            status="pending",
        )
        self.workflow_exec_repo.add(workflow_exec)
        await self.session.commit()
        await self.session.refresh(workflow_exec)

        route = route_for_project(
            project_id=str(project_id),
            namespace=self.settings.temporal_namespace,
            prefix=self.settings.temporal_queue_prefix,
            shards=self.settings.temporal_queue_shards,
            kind=kind,
        )

        try:
            client = await self.client_provider()
            await client.start_workflow(
                workflow_run,
                args=args,
                id=workflow_id,
                task_queue=route.task_queue,
                priority=route.priority,
            )
        except Exception as e:
            logger.error(
                "Failed to start workflow",
                workflow_id=workflow_id,
                workflow_type=workflow_type,
                entity_id=str(entity_id),
                error=str(e),
            )
            workflow_exec.status = "failed"
            workflow_exec.error_message = str(e)[:1000]
            await self.session.commit()
            raise

        self.workflow_exec_repo.mark_running(workflow_exec)
        await self.session.commit()
        logger.info(
            "Workflow started",
            workflow_id=workflow_id,
            workflow_type=workflow_type,
            task_queue=route.task_queue,
        )
        return workflow_id
