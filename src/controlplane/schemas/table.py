"""Table schemas for tenant DDL."""

from pydantic import BaseModel, Field, field_validator

from src.controlplane.core.security.validators import validate_table_name
from src.controlplane.schemas.column import ColumnCreate


class TableCreate(BaseModel):
    name: str
    columns: list[ColumnCreate] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_table_name(v)


class TableRename(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_table_name(v)


class TableDuplicate(TableRename):
    """Copy an existing table (structure and rows) under a new name."""


class Table(BaseModel):
    """A table as reported by pg_class."""

    id: int
    name: str
    schema_name: str = Field(serialization_alias="schema")
    estimated_rows: int
    total_size: str

    model_config = {"from_attributes": True}
