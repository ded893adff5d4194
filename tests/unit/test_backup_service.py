"""Tests for BackupService request-side guards."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.controlplane.core.exceptions import BadRequestError, NotFoundError
from src.controlplane.models.enums import BackupStatus
from src.controlplane.services.backup_service import BackupService
from src.controlplane.temporal.routing import QueueKind
from src.controlplane.temporal.workflows import BackupCreationWorkflow, BackupDeletionWorkflow
from tests.factories import BackupFactory, ProjectFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def project():
    return ProjectFactory.build()


@pytest.fixture
def backup_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock()
    repo.list_for_project = AsyncMock(return_value=[])
    repo.update_status = AsyncMock(return_value=True)
    repo.mark_deleting = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def launcher() -> MagicMock:
    launcher = MagicMock()
    launcher.start = AsyncMock(side_effect=lambda *args, **kwargs: kwargs["workflow_id"])
    return launcher


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(backup_repo, launcher, session) -> BackupService:
    return BackupService(backup_repo, launcher, session)


class TestGet:
    async def test_other_projects_backup_is_not_found(self, service, backup_repo, project):
        backup_repo.get_by_id.return_value = BackupFactory.build()

        with pytest.raises(NotFoundError, match="backup.error.notFound"):
            await service.get(project, backup_repo.get_by_id.return_value.id)

    async def test_missing_backup(self, service, backup_repo, project):
        backup_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.get(project, ProjectFactory.build().id)


class TestCreate:
    async def test_inserts_creating_row_then_starts_workflow(
        self, service, backup_repo, launcher, session, project
    ):
        backup, workflow_id = await service.create(project)

        assert backup.status == BackupStatus.CREATING.value
        assert backup.project_id == project.id
        backup_repo.add.assert_called_once_with(backup)
        session.commit.assert_awaited()

        args, kwargs = launcher.start.call_args
        assert args[0] == BackupCreationWorkflow.run
        [ctx] = args[1]
        assert ctx.backup_id == str(backup.id)
        assert ctx.project.db_name == project.db_name
        assert kwargs["kind"] == QueueKind.BACKUP
        assert kwargs["project_id"] == project.id
        assert workflow_id == f"backup-create-{backup.id}"

    async def test_start_failure_marks_creating_failed(
        self, service, backup_repo, launcher, project
    ):
        launcher.start.side_effect = RuntimeError("temporal unavailable")

        with pytest.raises(RuntimeError):
            await service.create(project)

        args, kwargs = backup_repo.update_status.call_args
        assert args[1] == BackupStatus.CREATING_FAILED.value
        assert kwargs["error"] == "temporal unavailable"


class TestDelete:
    async def test_created_backup_moves_to_deleting(
        self, service, backup_repo, launcher, session, project
    ):
        backup = BackupFactory.build(project_id=project.id)
        backup_repo.get_by_id.return_value = backup

        returned, workflow_id = await service.delete(project, backup.id)

        assert returned is backup
        backup_repo.mark_deleting.assert_awaited_once_with(backup.id)
        session.commit.assert_awaited()
        args, kwargs = launcher.start.call_args
        assert args[0] == BackupDeletionWorkflow.run
        assert workflow_id.startswith(f"backup-delete-{backup.id}-")

    async def test_deleting_backup_rejected(self, service, backup_repo, launcher, project):
        backup_repo.get_by_id.return_value = BackupFactory.deleting(project_id=project.id)

        with pytest.raises(BadRequestError, match="backup.error.deleteInProgress"):
            await service.delete(project, backup_repo.get_by_id.return_value.id)

        backup_repo.mark_deleting.assert_not_awaited()
        launcher.start.assert_not_awaited()

    async def test_creating_backup_rejected(self, service, backup_repo, launcher, project):
        backup_repo.get_by_id.return_value = BackupFactory.creating(project_id=project.id)

        with pytest.raises(BadRequestError, match="backup.error.createInProgress"):
            await service.delete(project, backup_repo.get_by_id.return_value.id)

        launcher.start.assert_not_awaited()

    async def test_lost_race_rejected(self, service, backup_repo, launcher, session, project):
        """Another request moved the row to deleting between read and update."""
        backup = BackupFactory.build(project_id=project.id)
        backup_repo.get_by_id.return_value = backup
        backup_repo.mark_deleting.return_value = False

        with pytest.raises(BadRequestError, match="backup.error.deleteInProgress"):
            await service.delete(project, backup.id)

        session.rollback.assert_awaited_once()
        launcher.start.assert_not_awaited()

    @pytest.mark.parametrize(
        "status", [BackupStatus.CREATING_FAILED.value, BackupStatus.DELETING_FAILED.value]
    )
    async def test_failed_backups_can_be_deleted(self, service, backup_repo, project, status):
        backup = BackupFactory.build(project_id=project.id, status=status)
        backup_repo.get_by_id.return_value = backup

        await service.delete(project, backup.id)

        backup_repo.mark_deleting.assert_awaited_once_with(backup.id)
