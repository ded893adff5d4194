"""Platform settings exposed to operators."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.storage import resolve_storage_driver
from src.controlplane.models.base import utc_now
from src.controlplane.models.public import STORAGE_DRIVER_SETTING, Setting
from src.controlplane.repositories import SettingRepository
from src.controlplane.schemas.setting import StorageDriverRead


class SettingService:
    def __init__(
        self,
        setting_repo: SettingRepository,
        session: AsyncSession,
        settings: Settings | None = None,
    ):
        self.setting_repo = setting_repo
        self.session = session
        self.settings = settings or get_settings()

    async def get_storage_driver(self) -> StorageDriverRead:
        """The driver backups use next, and whether it comes from the settings table."""
        value = await self.setting_repo.get_value(STORAGE_DRIVER_SETTING)
        driver = resolve_storage_driver(value, self.settings)
        return StorageDriverRead(driver=driver, configured=value == driver)

    async def set_storage_driver(self, driver: str) -> StorageDriverRead:
        """Switch the driver for future backups; existing artifacts are not moved."""
        setting = await self.setting_repo.get_by_name(STORAGE_DRIVER_SETTING)
        if setting is None:
            setting = Setting(
                name=STORAGE_DRIVER_SETTING,
                value=driver,
                default_value=self.settings.storage_driver,
            )
            self.setting_repo.add(setting)
        else:
            setting.value = driver
            setting.updated_at = utc_now()
        await self.session.commit()
        return StorageDriverRead(driver=driver, configured=True)
