"""Row payloads for tenant tables."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.controlplane.core.security.validators import validate_identifier


def _validate_columns(values: dict[str, Any]) -> dict[str, Any]:
    for column in values:
        validate_identifier(column, "column")
    return values


class RowCreate(BaseModel):
    """Column values for a new row; omitted columns take their defaults."""

    values: dict[str, Any] = Field(default_factory=dict)

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _validate_columns(v)


class RowUpdate(BaseModel):
    values: dict[str, Any] = Field(min_length=1)

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _validate_columns(v)


class RowPage(BaseModel):
    items: list[dict[str, Any]]
    total: int
    limit: int
    offset: int
