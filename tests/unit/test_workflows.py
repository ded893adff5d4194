"""Tests for backup and container workflows with mocked activities."""

import logging
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from temporalio import activity
from temporalio.client import WorkflowFailureError
from temporalio.exceptions import ApplicationError
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from src.controlplane.models.enums import BackupStatus, ProjectStatus
from src.controlplane.temporal.activities import (
    BackupCtx,
    BackupStepInput,
    ProjectContainerInput,
    ProjectCtx,
    UpdateBackupStatusInput,
    UpdateProjectStatusInput,
    UpdateWorkflowExecutionStatusInput,
)
from src.controlplane.temporal.workflows import (
    BackupCreationWorkflow,
    BackupDeletionWorkflow,
    ContainerRemovalWorkflow,
    ContainerStartWorkflow,
)

pytestmark = pytest.mark.unit

TASK_QUEUE = "test-queue"
PROJECT = ProjectCtx(project_id="7c1f", db_name="udb_7c1f", db_port=54021)
BACKUP = BackupCtx(backup_id="b-42", project=PROJECT)


class ActivityRecorder:
    """Mock activities registered under the real activity names.

    ``fail`` names the activity that raises; every call is recorded as
    ``(activity_name, input)`` in order.
    """

    def __init__(self, fail: str | None = None, container_exists: bool = False):
        self.fail = fail
        self.container_exists = container_exists
        self.calls: list[tuple[str, Any]] = []

    def _record(self, name: str, input: Any) -> None:
        self.calls.append((name, input))
        if self.fail == name:
            raise ApplicationError(f"{name} failed: connection refused", non_retryable=True)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def inputs(self, name: str) -> list[Any]:
        return [input for call_name, input in self.calls if call_name == name]

    def backup_activities(self) -> list[Any]:
        @activity.defn(name="dump_tenant_database")
        async def dump(input: BackupStepInput) -> str:
            self._record("dump_tenant_database", input)
            return f"/tmp/{input.ctx.dump_file_name}"

        @activity.defn(name="copy_dump_to_host")
        async def copy(input: BackupStepInput) -> str:
            self._record("copy_dump_to_host", input)
            return f"/var/backups/{input.ctx.dump_file_name}"

        @activity.defn(name="ensure_backup_container")
        async def ensure(input: BackupStepInput) -> bool:
            self._record("ensure_backup_container", input)
            return False

        @activity.defn(name="upload_backup")
        async def upload(input: BackupStepInput) -> str:
            self._record("upload_backup", input)
            return input.ctx.artifact_key

        @activity.defn(name="remove_local_dump")
        async def remove_dump(input: BackupStepInput) -> bool:
            self._record("remove_local_dump", input)
            return True

        @activity.defn(name="delete_backup_artifact")
        async def delete_artifact(input: BackupStepInput) -> bool:
            self._record("delete_backup_artifact", input)
            return True

        @activity.defn(name="update_backup_status")
        async def update_status(input: UpdateBackupStatusInput) -> bool:
            self._record("update_backup_status", input)
            return True

        @activity.defn(name="delete_backup_record")
        async def delete_record(input: BackupStepInput) -> bool:
            self._record("delete_backup_record", input)
            return True

        return [
            dump,
            copy,
            ensure,
            upload,
            remove_dump,
            delete_artifact,
            update_status,
            delete_record,
            self.tracking_activity(),
        ]

    def project_activities(self) -> list[Any]:
        @activity.defn(name="has_postgrest_container")
        async def has_container(input: ProjectContainerInput) -> bool:
            self._record("has_postgrest_container", input)
            return self.container_exists

        @activity.defn(name="start_postgrest_container")
        async def start(input: ProjectContainerInput) -> str:
            self._record("start_postgrest_container", input)
            return f"postgrest_{input.ctx.db_name}"

        @activity.defn(name="remove_postgrest_container")
        async def remove(input: ProjectContainerInput) -> None:
            self._record("remove_postgrest_container", input)

        @activity.defn(name="update_project_status")
        async def update_status(input: UpdateProjectStatusInput) -> bool:
            self._record("update_project_status", input)
            return True

        return [has_container, start, remove, update_status, self.tracking_activity()]

    def tracking_activity(self) -> Any:
        @activity.defn(name="update_workflow_execution_status")
        async def update_execution(input: UpdateWorkflowExecutionStatusInput) -> bool:
            self._record("update_workflow_execution_status", input)
            return True

        return update_execution


@pytest.fixture
async def env() -> AsyncGenerator[WorkflowEnvironment]:
    async with await WorkflowEnvironment.start_time_skipping() as env:
        yield env


async def run_backup_workflow(env, recorder, workflow, workflow_id: str) -> Any:
    async with Worker(
        env.client,
        task_queue=TASK_QUEUE,
        workflows=[BackupCreationWorkflow, BackupDeletionWorkflow],
        activities=recorder.backup_activities(),
    ):
        return await env.client.execute_workflow(
            workflow.run, BACKUP, id=workflow_id, task_queue=TASK_QUEUE
        )


async def run_container_workflow(env, recorder, workflow, args: list[Any], workflow_id: str) -> Any:
    async with Worker(
        env.client,
        task_queue=TASK_QUEUE,
        workflows=[ContainerStartWorkflow, ContainerRemovalWorkflow],
        activities=recorder.project_activities(),
    ):
        return await env.client.execute_workflow(
            workflow.run, args=args, id=workflow_id, task_queue=TASK_QUEUE
        )


class TestBackupCreationWorkflow:
    async def test_success_marks_created(self, env):
        recorder = ActivityRecorder()

        key = await run_backup_workflow(env, recorder, BackupCreationWorkflow, "backup-create-ok")

        assert key == "udb_7c1f/b-42.sql"
        assert recorder.names() == [
            "dump_tenant_database",
            "copy_dump_to_host",
            "ensure_backup_container",
            "upload_backup",
            "update_backup_status",
            "remove_local_dump",
            "update_workflow_execution_status",
        ]
        [status] = recorder.inputs("update_backup_status")
        assert status.status == BackupStatus.CREATED.value
        assert status.completed is True
        assert status.error is None
        [execution] = recorder.inputs("update_workflow_execution_status")
        assert execution.status == "completed"
        assert execution.workflow_id == "backup-create-ok"

    @pytest.mark.parametrize(
        "failing_step",
        ["dump_tenant_database", "copy_dump_to_host", "ensure_backup_container", "upload_backup"],
    )
    async def test_failed_step_marks_creating_failed(self, env, failing_step):
        recorder = ActivityRecorder(fail=failing_step)

        with pytest.raises(WorkflowFailureError):
            await run_backup_workflow(
                env, recorder, BackupCreationWorkflow, f"backup-create-{failing_step}"
            )

        [status] = recorder.inputs("update_backup_status")
        assert status.status == BackupStatus.CREATING_FAILED.value
        assert status.error == f"{failing_step} failed: connection refused"
        assert status.completed is False
        assert status.db_name == "udb_7c1f"
        assert "remove_local_dump" in recorder.names()
        [execution] = recorder.inputs("update_workflow_execution_status")
        assert execution.status == "failed"

    async def test_failure_log_carries_backup_fields(self, env, caplog):
        recorder = ActivityRecorder(fail="upload_backup")

        with caplog.at_level(logging.ERROR, logger="temporalio.workflow"):
            with pytest.raises(WorkflowFailureError):
                await run_backup_workflow(env, recorder, BackupCreationWorkflow, "backup-create-log")

        record = next(r for r in caplog.records if r.getMessage().startswith("Backup failed"))
        assert record.action == "backup"
        assert record.db == "udb_7c1f"
        assert record.backup_uuid == "b-42"
        assert record.error == "upload_backup failed: connection refused"

    async def test_failure_stops_the_pipeline(self, env):
        recorder = ActivityRecorder(fail="copy_dump_to_host")

        with pytest.raises(WorkflowFailureError):
            await run_backup_workflow(env, recorder, BackupCreationWorkflow, "backup-create-stop")

        assert "ensure_backup_container" not in recorder.names()
        assert "upload_backup" not in recorder.names()

    async def test_pipeline_steps_are_not_retried(self, env):
        recorder = ActivityRecorder(fail="dump_tenant_database")

        with pytest.raises(WorkflowFailureError):
            await run_backup_workflow(env, recorder, BackupCreationWorkflow, "backup-create-once")

        assert recorder.names().count("dump_tenant_database") == 1


class TestBackupDeletionWorkflow:
    async def test_success_deletes_artifact_then_record(self, env):
        recorder = ActivityRecorder()

        result = await run_backup_workflow(env, recorder, BackupDeletionWorkflow, "backup-del-ok")

        assert result == "b-42"
        assert recorder.names() == [
            "delete_backup_artifact",
            "delete_backup_record",
            "update_workflow_execution_status",
        ]

    async def test_artifact_failure_keeps_row_as_deleting_failed(self, env):
        recorder = ActivityRecorder(fail="delete_backup_artifact")

        with pytest.raises(WorkflowFailureError):
            await run_backup_workflow(env, recorder, BackupDeletionWorkflow, "backup-del-fail")

        assert "delete_backup_record" not in recorder.names()
        [status] = recorder.inputs("update_backup_status")
        assert status.status == BackupStatus.DELETING_FAILED.value
        assert "connection refused" in status.error
        assert status.db_name == "udb_7c1f"


class TestContainerStartWorkflow:
    async def test_start_marks_active(self, env):
        recorder = ActivityRecorder()

        status = await run_container_workflow(
            env, recorder, ContainerStartWorkflow, [PROJECT], "container-start-ok"
        )

        assert status == ProjectStatus.ACTIVE.value
        assert recorder.names() == [
            "start_postgrest_container",
            "update_project_status",
            "update_workflow_execution_status",
        ]
        [update] = recorder.inputs("update_project_status")
        assert update.db_name == "udb_7c1f"
        assert update.status == ProjectStatus.ACTIVE.value
        [start] = recorder.inputs("start_postgrest_container")
        assert start.ctx.db_port == 54021

    async def test_replace_removes_existing_container_first(self, env):
        recorder = ActivityRecorder(container_exists=True)

        await run_container_workflow(
            env, recorder, ContainerStartWorkflow, [PROJECT, True], "container-start-replace"
        )

        assert recorder.names()[:3] == [
            "has_postgrest_container",
            "remove_postgrest_container",
            "start_postgrest_container",
        ]

    async def test_replace_skips_removal_when_absent(self, env):
        recorder = ActivityRecorder(container_exists=False)

        await run_container_workflow(
            env, recorder, ContainerStartWorkflow, [PROJECT, True], "container-start-fresh"
        )

        assert "remove_postgrest_container" not in recorder.names()
        assert "start_postgrest_container" in recorder.names()

    async def test_start_failure_marks_error(self, env):
        recorder = ActivityRecorder(fail="start_postgrest_container")

        with pytest.raises(WorkflowFailureError):
            await run_container_workflow(
                env, recorder, ContainerStartWorkflow, [PROJECT], "container-start-fail"
            )

        [update] = recorder.inputs("update_project_status")
        assert update.status == ProjectStatus.ERROR.value
        [execution] = recorder.inputs("update_workflow_execution_status")
        assert execution.status == "failed"
        assert "connection refused" in execution.error_message


class TestContainerRemovalWorkflow:
    async def test_remove_marks_inactive(self, env):
        recorder = ActivityRecorder()

        status = await run_container_workflow(
            env, recorder, ContainerRemovalWorkflow, [PROJECT], "container-remove-ok"
        )

        assert status == ProjectStatus.INACTIVE.value
        assert recorder.names() == [
            "remove_postgrest_container",
            "update_project_status",
            "update_workflow_execution_status",
        ]
