"""Property-based tests for identifier and type validators using hypothesis."""

from uuid import UUID

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.controlplane.core.security.validators import (
    ALLOWED_COLUMN_TYPES,
    owner_role_name,
    quote_ident,
    tenant_database_name,
    validate_database_name,
)
from src.controlplane.schemas.column import ColumnCreate
from src.controlplane.schemas.table import TableCreate

pytestmark = pytest.mark.unit

valid_identifier = st.from_regex(r"^[A-Za-z_][A-Za-z0-9_-]*$", fullmatch=True).filter(
    lambda s: len(s) <= 63
    and not s.lower().startswith("pg_")
    and s.lower() not in {"information_schema", "oid", "xmin", "cmin", "xmax", "cmax", "tableoid"}
)
column_types = st.sampled_from(sorted(ALLOWED_COLUMN_TYPES))


def unquote_ident(quoted: str) -> str:
    assert quoted.startswith('"') and quoted.endswith('"')
    return quoted[1:-1].replace('""', '"')


@given(name=st.text(max_size=80))
def test_quote_ident_round_trips(name: str):
    """Every embedded quote is doubled, so the quoted form cannot terminate early."""
    quoted = quote_ident(name)
    assert unquote_ident(quoted) == name
    assert quoted[1:-1].replace('""', "").count('"') == 0


@given(name=valid_identifier)
@settings(max_examples=100)
def test_valid_table_names_accepted(name: str):
    table = TableCreate(name=name, columns=[ColumnCreate(name="id", type="serial")])
    assert table.name == name


@given(name=st.text(min_size=64, max_size=100))
def test_long_table_names_rejected(name: str):
    with pytest.raises(ValidationError) as exc_info:
        TableCreate(name=name, columns=[ColumnCreate(name="id", type="serial")])
    assert any(error["loc"] == ("name",) for error in exc_info.value.errors())


@given(name=st.from_regex(r"^[0-9][A-Za-z0-9_]*$", fullmatch=True).filter(lambda s: len(s) <= 63))
def test_digit_start_rejected(name: str):
    with pytest.raises(ValidationError):
        ColumnCreate(name=name, type="text")


@given(name=st.from_regex(r"^[A-Za-z_][A-Za-z0-9_]*[\"; ][A-Za-z0-9_]*$", fullmatch=True))
def test_quotes_and_separators_rejected(name: str):
    with pytest.raises(ValidationError):
        ColumnCreate(name=name, type="text")


@given(column_type=column_types, length=st.integers(min_value=1, max_value=10_000))
def test_allowed_types_with_arguments(column_type: str, length: int):
    column = ColumnCreate(name="value", type=f"{column_type.upper()}({length})")
    assert column.type == f"{column_type.upper()}({length})"


@given(
    column_type=st.text(min_size=1, max_size=30).filter(
        lambda s: s.strip().lower().partition("(")[0].strip() not in ALLOWED_COLUMN_TYPES
    )
)
def test_unlisted_types_rejected(column_type: str):
    with pytest.raises(ValidationError):
        ColumnCreate(name="value", type=column_type)


@given(column_type=column_types, suffix=st.sampled_from(["); DROP TABLE x", "(1", "(a)", "(1,2,3)"]))
def test_malformed_type_arguments_rejected(column_type: str, suffix: str):
    with pytest.raises(ValidationError):
        ColumnCreate(name="value", type=f"{column_type}{suffix}")


@given(default=st.text(max_size=40).flatmap(lambda s: st.sampled_from([f"{s};", f"{s}--", f"/*{s}"])))
def test_defaults_with_statement_breaks_rejected(default: str):
    with pytest.raises(ValidationError):
        ColumnCreate(name="value", type="text", default_value=default)


@given(project_id=st.uuids())
def test_derived_names_are_valid_database_names(project_id: UUID):
    db_name = tenant_database_name(project_id)
    assert validate_database_name(db_name) == db_name
    assert validate_database_name(owner_role_name(project_id))
