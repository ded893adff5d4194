"""Platform settings stored as name/value rows."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.controlplane.models.base import utc_now

STORAGE_DRIVER_SETTING = "storageDriver"


class Setting(SQLModel, table=True):
    __tablename__ = "settings"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    value: str = Field(default="", max_length=1000)
    default_value: str = Field(default="", max_length=1000)
    updated_at: datetime = Field(default_factory=utc_now)
