"""Tests for backup pipeline activities with an in-memory storage provider."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from temporalio.testing import ActivityEnvironment

from src.controlplane.core.exceptions import ContainerCommandError, NotFoundError
from src.controlplane.core.storage import (
    ContainerMetadata,
    FileInput,
    ListContainersInput,
    RenameFileInput,
    StorageProvider,
    UploadFileInput,
)
from src.controlplane.temporal.activities import (
    BackupActivities,
    BackupCtx,
    BackupStepInput,
    ProjectCtx,
    UpdateBackupStatusInput,
)
from tests.fakes import FakeCommandRunner

pytestmark = pytest.mark.unit

BACKUP_ID = "3d5b1c9e-7a42-4f0e-9b1d-2c6e8a4f7b10"
DB_NAME = "udb_9a7c3e1b5d2f4a6c8e0b1d3f5a7c9e2b"


class MemoryStorage(StorageProvider):
    """Containers as dicts of file name to bytes."""

    name = "memory"

    def __init__(self, settings):
        super().__init__(settings)
        self.containers: dict[str, dict[str, bytes]] = {}

    async def create_container(self, name: str) -> str:
        self.containers[name] = {}
        return name

    async def container_exists(self, name: str) -> bool:
        return name in self.containers

    async def list_containers(self, input: ListContainersInput) -> tuple[list[str], str]:
        return sorted(self.containers), ""

    async def show_container(self, name: str) -> ContainerMetadata:
        return ContainerMetadata(identifier=name, name=name)

    async def delete_container(self, name: str) -> None:
        self.containers.pop(name)

    async def upload_file(self, input: UploadFileInput) -> None:
        self.containers[input.container_name][input.file_name] = input.file_bytes

    async def rename_file(self, input: RenameFileInput) -> None:
        files = self.containers[input.container_name]
        files[input.new_file_name] = files.pop(input.file_name)

    async def download_file(self, input: FileInput) -> bytes:
        return self.containers[input.container_name][input.file_name]

    async def delete_file(self, input: FileInput) -> None:
        files = self.containers.get(input.container_name, {})
        if input.file_name not in files:
            raise NotFoundError("memory.error.fileNotFound")
        del files[input.file_name]


@pytest.fixture
def ctx() -> BackupCtx:
    return BackupCtx(backup_id=BACKUP_ID, project=ProjectCtx(project_id="p-1", db_name=DB_NAME))


@pytest.fixture
def step_input(ctx) -> BackupStepInput:
    return BackupStepInput(ctx=ctx)


@pytest.fixture
def storage(settings) -> MemoryStorage:
    return MemoryStorage(settings)


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def requested_drivers() -> list[str]:
    return []


@pytest.fixture
def activities(settings, runner, storage, requested_drivers) -> BackupActivities:
    def factory(driver, _settings):
        requested_drivers.append(driver)
        return storage

    acts = BackupActivities(MagicMock(), settings, runner, storage_provider_factory=factory)
    acts._sync_storage_driver_setting = lambda: "dropbox"
    return acts


@pytest.fixture
def env() -> ActivityEnvironment:
    return ActivityEnvironment()


class TestCtx:
    def test_artifact_key(self, ctx):
        assert ctx.artifact_key == f"{DB_NAME}/{BACKUP_ID}.sql"


class TestDumpAndCopy:
    async def test_dump_runs_pg_dump_in_database_container(
        self, env, activities, runner, step_input, settings
    ):
        path = await env.run(activities.dump_tenant_database, step_input)

        assert path == f"/tmp/{BACKUP_ID}.sql"
        assert runner.commands == [
            [
                "docker", "exec", settings.database_container_name,
                "pg_dump",
                "-U", settings.database_container_user,
                "-d", DB_NAME,
                "-f", f"/tmp/{BACKUP_ID}.sql",
            ]
        ]  # fmt: skip

    async def test_copy_to_backup_dir(self, env, activities, runner, step_input, settings):
        local = await env.run(activities.copy_dump_to_host, step_input)

        assert local == str(Path(settings.backup_tmp_dir) / f"{BACKUP_ID}.sql")
        assert runner.commands == [
            [
                "docker",
                "cp",
                f"{settings.database_container_name}:/tmp/{BACKUP_ID}.sql",
                local,
            ]
        ]

    async def test_dump_failure_propagates(self, env, settings, storage, step_input):
        runner = FakeCommandRunner(failures={"exec": 'pg_dump: error: database "x" does not exist'})
        acts = BackupActivities(MagicMock(), settings, runner, lambda d, s: storage)

        with pytest.raises(ContainerCommandError, match="does not exist"):
            await env.run(acts.dump_tenant_database, step_input)


class TestStorageSteps:
    async def test_ensure_container_creates_once(self, env, activities, storage, step_input, settings):
        assert await env.run(activities.ensure_backup_container, step_input) is True
        assert await env.run(activities.ensure_backup_container, step_input) is False
        assert list(storage.containers) == [settings.backup_container_name]

    async def test_driver_comes_from_setting(self, env, activities, step_input, requested_drivers):
        await env.run(activities.ensure_backup_container, step_input)
        assert requested_drivers == ["dropbox"]

    async def test_unknown_setting_uses_configured_driver(
        self, env, activities, step_input, requested_drivers, settings
    ):
        activities._sync_storage_driver_setting = lambda: "ftp"
        await env.run(activities.ensure_backup_container, step_input)
        assert requested_drivers == [settings.storage_driver]

    async def test_upload_stores_under_artifact_key(
        self, env, activities, storage, step_input, ctx, settings
    ):
        (Path(settings.backup_tmp_dir) / ctx.dump_file_name).write_bytes(b"-- dump\n")
        await storage.create_container(settings.backup_container_name)

        key = await env.run(activities.upload_backup, step_input)

        assert key == ctx.artifact_key
        assert storage.containers[settings.backup_container_name][key] == b"-- dump\n"

    async def test_upload_without_local_dump_fails(self, env, activities, step_input):
        with pytest.raises(FileNotFoundError):
            await env.run(activities.upload_backup, step_input)

    async def test_delete_artifact(self, env, activities, storage, step_input, ctx, settings):
        storage.containers[settings.backup_container_name] = {ctx.artifact_key: b"x"}

        assert await env.run(activities.delete_backup_artifact, step_input) is True
        assert storage.containers[settings.backup_container_name] == {}

    async def test_delete_missing_artifact_is_not_an_error(self, env, activities, step_input):
        assert await env.run(activities.delete_backup_artifact, step_input) is False


class TestLocalDumpCleanup:
    async def test_removes_file(self, env, activities, step_input, ctx, settings):
        path = Path(settings.backup_tmp_dir) / ctx.dump_file_name
        path.write_bytes(b"x")

        assert await env.run(activities.remove_local_dump, step_input) is True
        assert not path.exists()

    async def test_missing_file_is_fine(self, env, activities, step_input):
        assert await env.run(activities.remove_local_dump, step_input) is True

    async def test_cleanup_failure_is_logged_with_backup_fields(
        self, env, activities, step_input, ctx, settings, capturing_logger
    ):
        (Path(settings.backup_tmp_dir) / ctx.dump_file_name).mkdir()

        assert await env.run(activities.remove_local_dump, step_input) is False

        [warning] = [c for c in capturing_logger.calls if c.method_name == "warning"]
        assert warning.kwargs["action"] == "backup"
        assert warning.kwargs["db"] == DB_NAME
        assert warning.kwargs["backup_uuid"] == BACKUP_ID
        assert warning.kwargs["error"]


class TestStatusLogging:
    async def test_failure_status_logs_backup_fields(self, env, activities, capturing_logger):
        activities._sync_update_backup_status = lambda input: True
        status = UpdateBackupStatusInput(
            backup_id=BACKUP_ID,
            status="creating_failed",
            error="upload_backup failed: connection refused",
            db_name=DB_NAME,
        )

        assert await env.run(activities.update_backup_status, status) is True

        [error] = [c for c in capturing_logger.calls if c.method_name == "error"]
        assert error.kwargs["action"] == "backup"
        assert error.kwargs["db"] == DB_NAME
        assert error.kwargs["backup_uuid"] == BACKUP_ID
        assert error.kwargs["error"] == "upload_backup failed: connection refused"

    async def test_success_status_logs_nothing(self, env, activities, capturing_logger):
        activities._sync_update_backup_status = lambda input: True
        status = UpdateBackupStatusInput(backup_id=BACKUP_ID, status="created", completed=True)

        await env.run(activities.update_backup_status, status)

        assert not [c for c in capturing_logger.calls if c.method_name == "error"]

    async def test_missing_row_is_logged(self, env, activities, capturing_logger):
        activities._sync_update_backup_status = lambda input: False
        status = UpdateBackupStatusInput(backup_id=BACKUP_ID, status="created", db_name=DB_NAME)

        assert await env.run(activities.update_backup_status, status) is False

        [error] = [c for c in capturing_logger.calls if c.method_name == "error"]
        assert error.kwargs["event"] == "Backup not found"
        assert error.kwargs["backup_uuid"] == BACKUP_ID
