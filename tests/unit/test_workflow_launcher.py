"""Tests for WorkflowLauncher execution tracking."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.controlplane.services.workflow_launcher import WorkflowLauncher, unique_workflow_id
from src.controlplane.temporal.routing import QueueKind, route_for_project
from src.controlplane.temporal.workflows import ContainerStartWorkflow

pytestmark = pytest.mark.unit


@pytest.fixture
def exec_repo() -> MagicMock:
    return MagicMock()


@pytest.fixture
def temporal_client() -> MagicMock:
    client = MagicMock()
    client.start_workflow = AsyncMock()
    return client


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def launcher(session, exec_repo, temporal_client, settings) -> WorkflowLauncher:
    return WorkflowLauncher(
        session, exec_repo, settings, client_provider=AsyncMock(return_value=temporal_client)
    )


async def start(launcher: WorkflowLauncher, project_id=None) -> str:
    return await launcher.start(
        ContainerStartWorkflow.run,
        ["ctx", False],
        workflow_id="container-start-udb_x-1a2b3c4d",
        workflow_type="ContainerStartWorkflow",
        entity_type="project",
        entity_id=uuid4(),
        project_id=project_id or uuid4(),
        kind=QueueKind.PROJECT,
    )


class TestStart:
    async def test_records_then_starts_on_project_queue(
        self, launcher, exec_repo, temporal_client, settings
    ):
        project_id = uuid4()

        workflow_id = await start(launcher, project_id)

        assert workflow_id == "container-start-udb_x-1a2b3c4d"
        [execution] = exec_repo.add.call_args.args
        assert execution.workflow_type == "ContainerStartWorkflow"
        assert execution.entity_type == "project"
        exec_repo.mark_running.assert_called_once_with(execution)

        expected = route_for_project(
            project_id=str(project_id),
            namespace=settings.temporal_namespace,
            prefix=settings.temporal_queue_prefix,
            shards=settings.temporal_queue_shards,
            kind=QueueKind.PROJECT,
        )
        _, kwargs = temporal_client.start_workflow.call_args
        assert kwargs["task_queue"] == expected.task_queue
        assert kwargs["priority"].fairness_key == str(project_id)
        assert kwargs["args"] == ["ctx", False]

    async def test_start_failure_marks_failed(self, launcher, exec_repo, temporal_client, session):
        temporal_client.start_workflow.side_effect = RuntimeError("x" * 2000)

        with pytest.raises(RuntimeError):
            await start(launcher)

        [execution] = exec_repo.add.call_args.args
        assert execution.status == "failed"
        assert len(execution.error_message) == 1000
        exec_repo.mark_running.assert_not_called()
        assert session.commit.await_count == 2

    async def test_unreachable_temporal_is_recorded(self, session, exec_repo, settings):
        launcher = WorkflowLauncher(
            session,
            exec_repo,
            settings,
            client_provider=AsyncMock(side_effect=ConnectionError("temporal down")),
        )

        with pytest.raises(ConnectionError):
            await start(launcher)

        [execution] = exec_repo.add.call_args.args
        assert execution.error_message == "temporal down"


class TestUniqueWorkflowId:
    def test_ids_differ_per_call(self):
        first = unique_workflow_id("container-start", "udb_abc")
        second = unique_workflow_id("container-start", "udb_abc")

        assert first.startswith("container-start-udb_abc-")
        assert first != second
