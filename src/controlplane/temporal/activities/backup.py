"""Backup pipeline activities.

Each step of the backup pipeline is a separate activity so a failure is
attributed to one step and recorded on the backup row by the workflow.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import Session, select
from temporalio import activity

from src.controlplane.core.config import Settings
from src.controlplane.core.db.engine import ControlPlaneDatabase
from src.controlplane.core.exceptions import NotFoundError
from src.controlplane.core.logging import get_logger
from src.controlplane.core.process import CommandRunner
from src.controlplane.core.storage import (
    FileInput,
    StorageProvider,
    UploadFileInput,
    get_storage_provider,
    resolve_storage_driver,
)
from src.controlplane.models.base import utc_now
from src.controlplane.models.public import STORAGE_DRIVER_SETTING, Backup, BackupStatus, Setting
from src.controlplane.temporal.context import BackupCtx

logger = get_logger(__name__)

StorageProviderFactory = Callable[[str, Settings], StorageProvider]

ERROR_MAX_LENGTH = 2000


@dataclass
class BackupStepInput:
    ctx: BackupCtx


@dataclass
class UpdateBackupStatusInput:
    backup_id: str
    status: str  # BackupStatus value
    error: str | None = None
    completed: bool = False
    db_name: str | None = None


class BackupActivities:
    """Activities for backup creation and deletion.

    Dependencies are injected by the worker: the control-plane database
    handle, the command runner used for ``docker exec``/``docker cp`` and
    a factory that builds the configured storage provider.
    """

    def __init__(
        self,
        db: ControlPlaneDatabase,
        settings: Settings,
        runner: CommandRunner,
        storage_provider_factory: StorageProviderFactory = get_storage_provider,
    ):
        self.db = db
        self.settings = settings
        self.runner = runner
        self.storage_provider_factory = storage_provider_factory

    def _container_dump_path(self, ctx: BackupCtx) -> str:
        return f"/tmp/{ctx.dump_file_name}"

    def _local_dump_path(self, ctx: BackupCtx) -> Path:
        return Path(self.settings.backup_tmp_dir) / ctx.dump_file_name

    def _sync_storage_driver_setting(self) -> str | None:
        with Session(self.db.sync_engine) as session:
            return session.scalars(
                select(Setting.value).where(Setting.name == STORAGE_DRIVER_SETTING)
            ).first()

    async def _storage(self) -> StorageProvider:
        setting_value = await asyncio.to_thread(self._sync_storage_driver_setting)
        driver = resolve_storage_driver(setting_value, self.settings)
        return self.storage_provider_factory(driver, self.settings)

    @activity.defn
    async def dump_tenant_database(self, input: BackupStepInput) -> str:
        """Run pg_dump inside the database container. Returns the in-container path."""
        ctx = input.ctx
        path = self._container_dump_path(ctx)
        activity.logger.info(f"Dumping database {ctx.project.db_name} for backup {ctx.backup_id}")
        await self.runner.run(
            [
                "docker", "exec", self.settings.database_container_name,
                "pg_dump",
                "-U", self.settings.database_container_user,
                "-d", ctx.project.db_name,
                "-f", path,
            ]
        )  # fmt: skip
        return path

    @activity.defn
    async def copy_dump_to_host(self, input: BackupStepInput) -> str:
        """Copy the dump out of the database container. Returns the local path."""
        ctx = input.ctx
        local_path = self._local_dump_path(ctx)
        source = f"{self.settings.database_container_name}:{self._container_dump_path(ctx)}"
        activity.logger.info(f"Copying {source} to {local_path}")
        await self.runner.run(["docker", "cp", source, str(local_path)])
        return str(local_path)

    @activity.defn
    async def ensure_backup_container(self, input: BackupStepInput) -> bool:
        """Create the backup storage container if absent. Returns True if it was created."""
        storage = await self._storage()
        name = self.settings.backup_container_name
        if await storage.container_exists(name):
            return False
        activity.logger.info(f"Creating backup container {name} on {storage.name}")
        await storage.create_container(name)
        return True

    @activity.defn
    async def upload_backup(self, input: BackupStepInput) -> str:
        """Upload the local dump to <db_name>/<backup_id>.sql. Returns the key."""
        ctx = input.ctx
        content = await asyncio.to_thread(self._local_dump_path(ctx).read_bytes)
        storage = await self._storage()
        await storage.upload_file(
            UploadFileInput(
                container_name=self.settings.backup_container_name,
                file_name=ctx.artifact_key,
                file_bytes=content,
            )
        )
        activity.logger.info(
            f"Uploaded backup {ctx.backup_id} ({len(content)} bytes) to {ctx.artifact_key}"
        )
        return ctx.artifact_key

    @activity.defn
    async def remove_local_dump(self, input: BackupStepInput) -> bool:
        """Delete the local dump file. Best effort: failures are logged, not raised."""
        path = self._local_dump_path(input.ctx)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning(
                "Failed to remove local dump",
                action="backup",
                db=input.ctx.project.db_name,
                backup_uuid=input.ctx.backup_id,
                path=str(path),
                error=str(e),
            )
            return False
        return True

    @activity.defn
    async def delete_backup_artifact(self, input: BackupStepInput) -> bool:
        """Delete the stored artifact. Returns False if it was already gone."""
        ctx = input.ctx
        storage = await self._storage()
        try:
            await storage.delete_file(
                FileInput(
                    container_name=self.settings.backup_container_name,
                    file_name=ctx.artifact_key,
                )
            )
        except NotFoundError:
            activity.logger.info(f"Backup artifact {ctx.artifact_key} already absent")
            return False
        return True

    def _sync_update_backup_status(self, input: UpdateBackupStatusInput) -> bool:
        error = input.error[:ERROR_MAX_LENGTH] if input.error else None
        values: dict[str, object] = {"status": BackupStatus(input.status).value, "error": error}
        if input.completed:
            values["completed_at"] = utc_now()
        with Session(self.db.sync_engine) as session:
            result = session.execute(
                update(Backup).where(Backup.id == UUID(input.backup_id)).values(**values)  # type: ignore[arg-type]
            )
            session.commit()
            return result.rowcount > 0

    @activity.defn
    async def update_backup_status(self, input: UpdateBackupStatusInput) -> bool:
        """Set the backup status. Setting a value is idempotent, so retries are safe."""
        if input.error:
            logger.error(
                "Backup failed",
                action="backup",
                db=input.db_name,
                backup_uuid=input.backup_id,
                status=input.status,
                error=input.error,
            )
        result = await asyncio.to_thread(self._sync_update_backup_status, input)
        if not result:
            logger.error(
                "Backup not found",
                action="backup",
                db=input.db_name,
                backup_uuid=input.backup_id,
            )
        return result

    def _sync_delete_backup_record(self, backup_id: str) -> bool:
        with Session(self.db.sync_engine) as session:
            result = session.execute(delete(Backup).where(Backup.id == UUID(backup_id)))  # type: ignore[arg-type]
            session.commit()
            return result.rowcount > 0

    @activity.defn
    async def delete_backup_record(self, input: BackupStepInput) -> bool:
        activity.logger.info(f"Deleting backup record {input.ctx.backup_id}")
        return await asyncio.to_thread(self._sync_delete_backup_record, input.ctx.backup_id)
