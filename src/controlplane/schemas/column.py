"""Column schemas for tenant table DDL and catalog reads."""

from pydantic import BaseModel, Field, field_validator, model_validator

from src.controlplane.core.security.validators import (
    validate_column_name,
    validate_column_type,
    validate_table_name,
)


class ColumnCreate(BaseModel):
    """A column definition destined for CREATE TABLE / ADD COLUMN.

    ``type`` and ``default_value`` are rendered into DDL verbatim, so both
    are checked here before any SQL is generated.
    """

    name: str
    type: str
    primary: bool = False
    unique: bool = False
    not_null: bool = False
    default_value: str | None = Field(default=None, max_length=255)
    foreign: bool = False
    reference_table: str | None = None
    reference_column: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_column_name(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return validate_column_type(v)

    @field_validator("default_value")
    @classmethod
    def validate_default(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if ";" in v or "--" in v or "/*" in v:
            raise ValueError("default value contains forbidden characters")
        return v

    @field_validator("reference_table")
    @classmethod
    def validate_reference_table(cls, v: str | None) -> str | None:
        if v is None:
            return None
        _, _, table = v.rpartition(".")
        validate_table_name(table)
        return v

    @field_validator("reference_column")
    @classmethod
    def validate_reference_column(cls, v: str | None) -> str | None:
        return validate_column_name(v) if v is not None else None

    @model_validator(mode="after")
    def check_foreign_reference(self) -> "ColumnCreate":
        if self.foreign and not (self.reference_table and self.reference_column):
            raise ValueError("foreign columns require reference_table and reference_column")
        return self


class ColumnAlter(BaseModel):
    """Type change for an existing column."""

    name: str
    type: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_column_name(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return validate_column_type(v)


class ColumnRename(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_column_name(v)


class ColumnsCreateRequest(BaseModel):
    columns: list[ColumnCreate] = Field(min_length=1)


class ColumnsAlterRequest(BaseModel):
    columns: list[ColumnAlter] = Field(min_length=1)


class Column(BaseModel):
    """A column as reported by the tenant's system catalog."""

    name: str
    position: int
    not_null: bool
    type: str
    default_value: str | None = None
    primary: bool = False
    unique: bool = False
    foreign: bool = False
    reference_table: str | None = None
    reference_column: str | None = None

    model_config = {"from_attributes": True}
