"""Security utilities - identifier validation and quoting."""

from src.controlplane.core.security.validators import (
    ALLOWED_COLUMN_TYPES,
    owner_role_name,
    quote_ident,
    tenant_database_name,
    validate_column_name,
    validate_column_type,
    validate_database_name,
    validate_identifier,
    validate_index_name,
    validate_table_name,
)

__all__ = [
    "ALLOWED_COLUMN_TYPES",
    "owner_role_name",
    "quote_ident",
    "tenant_database_name",
    "validate_column_name",
    "validate_column_type",
    "validate_database_name",
    "validate_identifier",
    "validate_index_name",
    "validate_table_name",
]
