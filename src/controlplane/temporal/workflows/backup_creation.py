"""
Backup Creation Workflow.

Steps (any failure marks the backup creating_failed and stops):
1. pg_dump inside the database container
2. docker cp the dump to the worker host
3. Ensure the backup storage container exists
4. Upload the dump to <db_name>/<backup_id>.sql
5. Mark created with a completion time

The local dump is removed afterwards on both paths, best effort.
Pipeline steps run once: the operator re-issues the backup instead.
"""

from temporalio import workflow
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from src.controlplane.models.enums import BackupStatus
    from src.controlplane.temporal.activities import (
        BackupActivities,
        BackupCtx,
        BackupStepInput,
        UpdateBackupStatusInput,
    )
    from src.controlplane.temporal.workflows._steps.common import (
        failure_message,
        record_execution_status,
        short_activity_opts,
        single_attempt_opts,
    )


@workflow.defn
class BackupCreationWorkflow:
    @workflow.run
    async def run(self, ctx: BackupCtx) -> str:
        """
        Run the backup pipeline for one backup row (already in ``creating``).

        Args:
            ctx: Backup and project context built by the service layer

        Returns:
            The storage key of the uploaded artifact
        """
        step_input = BackupStepInput(ctx=ctx)
        pipeline = [
            BackupActivities.dump_tenant_database,
            BackupActivities.copy_dump_to_host,
            BackupActivities.ensure_backup_container,
            BackupActivities.upload_backup,
        ]

        try:
            for step in pipeline:
                await workflow.execute_activity_method(
                    step,  # type: ignore[arg-type]
                    step_input,
                    **single_attempt_opts(),  # type: ignore[arg-type]
                )

            await workflow.execute_activity_method(
                BackupActivities.update_backup_status,
                UpdateBackupStatusInput(
                    backup_id=ctx.backup_id,
                    status=BackupStatus.CREATED.value,
                    completed=True,
                ),
                **short_activity_opts(),  # type: ignore[arg-type]
            )
        except ActivityError as e:
            error = failure_message(e)
            workflow.logger.error(
                "Backup failed",
                extra={
                    "action": "backup",
                    "db": ctx.project.db_name,
                    "backup_uuid": ctx.backup_id,
                    "error": error,
                },
            )

            await workflow.execute_activity_method(
                BackupActivities.update_backup_status,
                UpdateBackupStatusInput(
                    backup_id=ctx.backup_id,
                    status=BackupStatus.CREATING_FAILED.value,
                    error=error,
                    db_name=ctx.project.db_name,
                ),
                **short_activity_opts(),  # type: ignore[arg-type]
            )
            await self._remove_local_dump(step_input)
            await record_execution_status("failed", error)
            raise

        await self._remove_local_dump(step_input)
        await record_execution_status("completed")
        workflow.logger.info(f"Backup {ctx.backup_id} created at {ctx.artifact_key}")
        return ctx.artifact_key

    async def _remove_local_dump(self, step_input: BackupStepInput) -> None:
        await workflow.execute_activity_method(
            BackupActivities.remove_local_dump,
            step_input,
            **short_activity_opts(),  # type: ignore[arg-type]
        )
