"""Identifier validators and quoting for generated SQL."""

import re
from typing import Final
from uuid import UUID

MAX_IDENTIFIER_LENGTH: Final[int] = 63  # PostgreSQL identifier limit
TENANT_DATABASE_PREFIX: Final[str] = "udb_"
OWNER_ROLE_PREFIX: Final[str] = "usr_"

IDENTIFIER_REGEX: Final[str] = r"^[A-Za-z_][A-Za-z0-9_-]*$"
DATABASE_NAME_REGEX: Final[str] = r"^[a-z_][a-z0-9_]*$"

_IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(IDENTIFIER_REGEX)
_DATABASE_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(DATABASE_NAME_REGEX)
_TYPE_ARGS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*\d+(\s*,\s*\d+)?\s*$")

RESERVED_TABLE_NAMES: Final[frozenset[str]] = frozenset({"pg_catalog", "information_schema"})
RESERVED_COLUMN_NAMES: Final[frozenset[str]] = frozenset(
    {"oid", "xmin", "cmin", "xmax", "cmax", "tableoid"}
)
RESERVED_INDEX_NAMES: Final[frozenset[str]] = frozenset(
    {"primary", "unique", "foreign", "exclude"}
)
ALLOWED_COLUMN_TYPES: Final[frozenset[str]] = frozenset(
    {
        "integer",
        "serial",
        "varchar",
        "text",
        "boolean",
        "date",
        "timestamp",
        "float",
        "uuid",
        "json",
    }
)


def quote_ident(name: str) -> str:
    """Quote an identifier for PostgreSQL, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """Validate a user-supplied table/column/index/function name.

    Names are always quoted when rendered; this check keeps them within
    PostgreSQL's length limit and a conservative character set.

    Raises:
        ValueError: If the name is empty, too long, or has invalid characters
    """
    if not name:
        raise ValueError(f"{kind} name is required")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(
            f"{kind} name exceeds PostgreSQL limit: {len(name)} > {MAX_IDENTIFIER_LENGTH}"
        )
    if not _IDENTIFIER_PATTERN.fullmatch(name):
        raise ValueError(
            f"{kind} name must start with a letter or underscore and contain only "
            "letters, numbers, underscores and dashes"
        )
    return name


def validate_table_name(name: str) -> str:
    validate_identifier(name, "table")
    if name.lower() in RESERVED_TABLE_NAMES or name.lower().startswith("pg_"):
        raise ValueError(f"table name '{name}' is reserved and cannot be used")
    return name


def validate_column_name(name: str) -> str:
    validate_identifier(name, "column")
    if name.lower() in RESERVED_COLUMN_NAMES:
        raise ValueError(f"column name '{name}' is reserved and cannot be used")
    return name


def validate_index_name(name: str) -> str:
    validate_identifier(name, "index")
    if name.lower() in RESERVED_INDEX_NAMES:
        raise ValueError(f"index name '{name}' is reserved and cannot be used")
    return name


def validate_column_type(column_type: str) -> str:
    """Check a declared column type against the allow-list.

    Accepts the base type optionally followed by numeric arguments,
    e.g. ``varchar(255)``.
    """
    normalized = column_type.strip().lower()
    base, _, rest = normalized.partition("(")
    if base.strip() not in ALLOWED_COLUMN_TYPES:
        raise ValueError(f"column type '{column_type}' is not allowed")
    if rest:
        if not rest.endswith(")") or not _TYPE_ARGS_PATTERN.fullmatch(rest[:-1]):
            raise ValueError(f"column type '{column_type}' has invalid arguments")
    return column_type.strip()


def validate_database_name(name: str) -> str:
    """Validate a tenant database name before it reaches CREATE/DROP DATABASE."""
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(
            f"Database name exceeds PostgreSQL limit: {len(name)} > {MAX_IDENTIFIER_LENGTH}"
        )
    if not _DATABASE_NAME_PATTERN.fullmatch(name):
        raise ValueError(f"Invalid database name format: {name}")
    return name


def tenant_database_name(project_id: UUID) -> str:
    """Derive the tenant database name for a project: udb_<hex uuid>."""
    return f"{TENANT_DATABASE_PREFIX}{project_id.hex}"


def owner_role_name(owner_id: UUID | str) -> str:
    """Derive the per-owner role token substituted into seed files."""
    return f"{OWNER_ROLE_PREFIX}{str(owner_id).replace('-', '_')}"
