"""
PostgREST container workflows.

ContainerStartWorkflow: run the container, then mark the project active
(or error if the runtime rejects the run).
ContainerRemovalWorkflow: stop and remove the container, then mark the
project inactive.
"""

from temporalio import workflow
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from src.controlplane.models.enums import ProjectStatus
    from src.controlplane.temporal.activities import (
        ProjectActivities,
        ProjectContainerInput,
        ProjectCtx,
        UpdateProjectStatusInput,
    )
    from src.controlplane.temporal.workflows._steps.common import (
        failure_message,
        record_execution_status,
        short_activity_opts,
        single_attempt_opts,
    )


async def _set_project_status(ctx: ProjectCtx, status: ProjectStatus) -> None:
    await workflow.execute_activity_method(
        ProjectActivities.update_project_status,
        UpdateProjectStatusInput(db_name=ctx.db_name, status=status.value),
        **short_activity_opts(),  # type: ignore[arg-type]
    )


@workflow.defn
class ContainerStartWorkflow:
    @workflow.run
    async def run(self, ctx: ProjectCtx, replace_existing: bool = False) -> str:
        """
        Start the project's PostgREST container.

        Args:
            ctx: Project context
            replace_existing: Remove an existing container first, running or
                stopped (bulk restarts)

        Returns:
            The project status after the run
        """
        container_input = ProjectContainerInput(ctx=ctx)
        try:
            if replace_existing:
                exists = await workflow.execute_activity_method(
                    ProjectActivities.has_postgrest_container,
                    container_input,
                    **short_activity_opts(),  # type: ignore[arg-type]
                )
                if exists:
                    await workflow.execute_activity_method(
                        ProjectActivities.remove_postgrest_container,
                        container_input,
                        **short_activity_opts(),  # type: ignore[arg-type]
                    )

            await workflow.execute_activity_method(
                ProjectActivities.start_postgrest_container,
                container_input,
                **single_attempt_opts(),  # type: ignore[arg-type]
            )
        except ActivityError as e:
            error = failure_message(e)
            workflow.logger.error(
                "Container start failed",
                extra={"action": "postgrest", "db": ctx.db_name, "error": error},
            )
            await _set_project_status(ctx, ProjectStatus.ERROR)
            await record_execution_status("failed", error)
            raise

        await _set_project_status(ctx, ProjectStatus.ACTIVE)
        await record_execution_status("completed")
        return ProjectStatus.ACTIVE.value


@workflow.defn
class ContainerRemovalWorkflow:
    @workflow.run
    async def run(self, ctx: ProjectCtx) -> str:
        await workflow.execute_activity_method(
            ProjectActivities.remove_postgrest_container,
            ProjectContainerInput(ctx=ctx),
            **short_activity_opts(),  # type: ignore[arg-type]
        )
        await _set_project_status(ctx, ProjectStatus.INACTIVE)
        await record_execution_status("completed")
        return ProjectStatus.INACTIVE.value
