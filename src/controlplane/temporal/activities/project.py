"""PostgREST container activities for a project's tenant database."""

import asyncio
from dataclasses import dataclass

from sqlalchemy import update
from sqlmodel import Session
from temporalio import activity

from src.controlplane.core.containers import PostgrestOrchestrator
from src.controlplane.core.db.engine import ControlPlaneDatabase
from src.controlplane.models.base import utc_now
from src.controlplane.models.public import Project, ProjectStatus
from src.controlplane.temporal.context import ProjectCtx


@dataclass
class ProjectContainerInput:
    ctx: ProjectCtx


@dataclass
class UpdateProjectStatusInput:
    db_name: str
    status: str  # ProjectStatus value


class ProjectActivities:
    """Container lifecycle activities with an injected orchestrator and database handle."""

    def __init__(self, db: ControlPlaneDatabase, orchestrator: PostgrestOrchestrator):
        self.db = db
        self.orchestrator = orchestrator

    @activity.defn
    async def has_postgrest_container(self, input: ProjectContainerInput) -> bool:
        return await self.orchestrator.has_container(input.ctx.db_name)

    @activity.defn
    async def start_postgrest_container(self, input: ProjectContainerInput) -> str:
        """
        Start the PostgREST container for the tenant database.

        Not idempotent: a second start collides on the container name, so the
        workflow runs this with a single attempt.

        Returns:
            The container name
        """
        ctx = input.ctx
        activity.logger.info(f"Starting PostgREST container for {ctx.db_name}")
        await self.orchestrator.start_container(ctx.db_name, ctx.db_port)
        return self.orchestrator.container_name(ctx.db_name)

    @activity.defn
    async def remove_postgrest_container(self, input: ProjectContainerInput) -> None:
        """Stop and remove the container. Step failures are logged by the orchestrator."""
        activity.logger.info(f"Removing PostgREST container for {input.ctx.db_name}")
        await self.orchestrator.remove_container(input.ctx.db_name)

    def _sync_update_project_status(self, db_name: str, status: str) -> bool:
        with Session(self.db.sync_engine) as session:
            result = session.execute(
                update(Project)
                .where(Project.db_name == db_name)  # type: ignore[arg-type]
                .values(status=ProjectStatus(status).value, updated_at=utc_now())
            )
            session.commit()
            return result.rowcount > 0

    @activity.defn
    async def update_project_status(self, input: UpdateProjectStatusInput) -> bool:
        """Set project status by tenant database name.

        Returns:
            True if updated, False if the project no longer exists
        """
        result = await asyncio.to_thread(
            self._sync_update_project_status, input.db_name, input.status
        )
        if not result:
            activity.logger.warning(
                f"action=postgrest db={input.db_name} "
                f"Failed to update project status to {input.status}: project not found"
            )
        return result
