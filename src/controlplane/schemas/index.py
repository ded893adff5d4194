"""Index schemas for tenant DDL."""

from pydantic import BaseModel, Field, field_validator

from src.controlplane.core.security.validators import (
    validate_column_name,
    validate_index_name,
)


class IndexCreate(BaseModel):
    name: str
    columns: list[str] = Field(min_length=1)
    unique: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_index_name(v)

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: list[str]) -> list[str]:
        return [validate_column_name(column) for column in v]


class Index(BaseModel):
    name: str
    table_name: str
    columns: list[str]
    unique: bool
    definition: str

    model_config = {"from_attributes": True}
