"""Repository for platform settings."""

from sqlmodel import select

from src.controlplane.models.public import Setting
from src.controlplane.repositories.base import BaseRepository


class SettingRepository(BaseRepository[Setting]):
    model = Setting

    async def get_by_name(self, name: str) -> Setting | None:
        result = await self.session.execute(select(Setting).where(Setting.name == name))
        return result.scalar_one_or_none()

    async def get_value(self, name: str) -> str | None:
        """Get a setting's value, or None if the row is missing or empty."""
        setting = await self.get_by_name(name)
        if setting is None or not setting.value:
            return None
        return setting.value
