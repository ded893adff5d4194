"""Stored function schemas for tenant DDL."""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from src.controlplane.core.security.validators import validate_identifier

FunctionLanguage = Literal["plpgsql", "sql"]

_TYPE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_ ]*(\(\d+(,\s*\d+)?\))?(\[\])?$")


def _validate_type_name(v: str) -> str:
    v = v.strip()
    if not _TYPE_PATTERN.match(v):
        raise ValueError(f"invalid type name: {v}")
    return v


class FunctionParameter(BaseModel):
    name: str
    type: str = Field(min_length=1, max_length=63)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_identifier(v, "parameter")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _validate_type_name(v)


class FunctionCreate(BaseModel):
    name: str
    parameters: list[FunctionParameter] = Field(default_factory=list)
    definition: str = Field(min_length=1)
    language: FunctionLanguage = "plpgsql"
    return_type: str = Field(min_length=1, max_length=63)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_identifier(v, "function")

    @field_validator("return_type")
    @classmethod
    def validate_return_type(cls, v: str) -> str:
        return _validate_type_name(v)


class Function(BaseModel):
    """A routine as reported by information_schema.routines."""

    name: str
    type: str
    data_type: str | None = None
    type_udt_name: str | None = None
    definition: str | None = None
    language: str | None = None
    sql_data_access: str | None = None

    model_config = {"from_attributes": True}
