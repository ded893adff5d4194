"""SQL text builders for tenant schema changes.

Identifiers are always quoted through ``quote_ident``. Column types,
default expressions, function signatures and bodies are trusted
fragments: request schemas validate them before they get here.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from src.controlplane.core.security.validators import quote_ident

DEFAULT_SCHEMA = "public"


class ColumnSpec(Protocol):
    name: str
    type: str
    primary: bool
    unique: bool
    not_null: bool
    default_value: str | None
    foreign: bool
    reference_table: str | None
    reference_column: str | None


class ParameterSpec(Protocol):
    name: str
    type: str


def parse_table_name(full_name: str) -> tuple[str, str]:
    """Split ``schema.table`` into its parts; bare names live in public."""
    schema, dot, table = full_name.rpartition(".")
    if not dot:
        return DEFAULT_SCHEMA, full_name
    return schema or DEFAULT_SCHEMA, table


def qualified_name(full_name: str) -> str:
    schema, table = parse_table_name(full_name)
    return f"{quote_ident(schema)}.{quote_ident(table)}"


def build_column_definition(column: ColumnSpec) -> str:
    """Render one column clause: name, type, then constraints in a fixed order."""
    parts = [quote_ident(column.name), column.type]
    if column.primary:
        parts.append("PRIMARY KEY")
    if column.unique:
        parts.append("UNIQUE")
    if column.not_null:
        parts.append("NOT NULL")
    if column.default_value:
        parts.append(f"DEFAULT {column.default_value}")
    return " ".join(parts)


def foreign_key_constraint_name(column_name: str) -> str:
    return f"fk_{column_name}"


def build_foreign_key_constraint(table: str, column: ColumnSpec) -> str | None:
    """Render the ALTER TABLE that adds a column's foreign key, if it has one.

    Raises:
        ValueError: If the column is flagged foreign without both reference fields
    """
    if not column.foreign:
        return None
    if not column.reference_table or not column.reference_column:
        raise ValueError(
            f"column '{column.name}' is foreign but has no reference table/column"
        )
    return (
        f"ALTER TABLE {qualified_name(table)} "
        f"ADD CONSTRAINT {quote_ident(foreign_key_constraint_name(column.name))} "
        f"FOREIGN KEY ({quote_ident(column.name)}) "
        f"REFERENCES {qualified_name(column.reference_table)} "
        f"({quote_ident(column.reference_column)})"
    )


def build_foreign_key_constraints(table: str, columns: Iterable[ColumnSpec]) -> list[str]:
    statements = []
    for column in columns:
        statement = build_foreign_key_constraint(table, column)
        if statement is not None:
            statements.append(statement)
    return statements


def build_create_table(table: str, columns: Sequence[ColumnSpec]) -> str:
    if not columns:
        raise ValueError("a table needs at least one column")
    definitions = ",\n    ".join(build_column_definition(c) for c in columns)
    return f"CREATE TABLE {qualified_name(table)} (\n    {definitions}\n)"


def build_add_columns(table: str, columns: Sequence[ColumnSpec]) -> str:
    if not columns:
        raise ValueError("no columns to add")
    clauses = ", ".join(f"ADD COLUMN {build_column_definition(c)}" for c in columns)
    return f"ALTER TABLE {qualified_name(table)} {clauses}"


def build_alter_column_type(table: str, column: str, column_type: str) -> str:
    return (
        f"ALTER TABLE {qualified_name(table)} "
        f"ALTER COLUMN {quote_ident(column)} TYPE {column_type}"
    )


def build_drop_columns(table: str, columns: Sequence[str]) -> str:
    if not columns:
        raise ValueError("no columns to drop")
    clauses = ", ".join(f"DROP COLUMN {quote_ident(c)}" for c in columns)
    return f"ALTER TABLE {qualified_name(table)} {clauses}"


def build_create_index(table: str, name: str, columns: Sequence[str], unique: bool) -> str:
    if not columns:
        raise ValueError("an index needs at least one column")
    keyword = "CREATE UNIQUE INDEX" if unique else "CREATE INDEX"
    column_list = ", ".join(quote_ident(c) for c in columns)
    return f"{keyword} {quote_ident(name)} ON {qualified_name(table)} ({column_list})"


def _dollar_quote(body: str) -> str:
    tag = "$fn$"
    suffix = 0
    while tag in body:
        suffix += 1
        tag = f"$fn{suffix}$"
    return tag


def build_create_function(
    schema: str,
    name: str,
    parameters: Sequence[ParameterSpec],
    return_type: str,
    body: str,
    language: str,
) -> str:
    """Render CREATE OR REPLACE FUNCTION with a collision-free dollar-quote tag."""
    params = ", ".join(f"{quote_ident(p.name)} {p.type}" for p in parameters)
    body = body.strip()
    if language == "plpgsql" and not body.endswith(";"):
        body += ";"
    tag = _dollar_quote(body)
    return (
        f"CREATE OR REPLACE FUNCTION {quote_ident(schema)}.{quote_ident(name)}({params}) "
        f"RETURNS {return_type} AS {tag}\n{body}\n{tag} LANGUAGE {language}"
    )


def build_drop_function(schema: str, name: str) -> str:
    return f"DROP FUNCTION IF EXISTS {quote_ident(schema)}.{quote_ident(name)} CASCADE"
