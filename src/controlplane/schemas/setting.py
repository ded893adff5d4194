from pydantic import BaseModel, field_validator

from src.controlplane.models.enums import StorageDriver


class StorageDriverRead(BaseModel):
    driver: str
    configured: bool  # False when falling back to the environment default


class StorageDriverUpdate(BaseModel):
    driver: str

    @field_validator("driver")
    @classmethod
    def validate_driver(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in {d.value for d in StorageDriver}:
            raise ValueError(f"Unknown storage driver '{v}'")
        return v
