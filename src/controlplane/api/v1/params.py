"""Path and query parameter types shared by the schema routers."""

from typing import Annotated

from fastapi import Path, Query

from src.controlplane.core.security.validators import IDENTIFIER_REGEX, MAX_IDENTIFIER_LENGTH

TableName = Annotated[
    str,
    Path(max_length=MAX_IDENTIFIER_LENGTH, pattern=IDENTIFIER_REGEX, description="Table name"),
]
ColumnName = Annotated[
    str,
    Path(max_length=MAX_IDENTIFIER_LENGTH, pattern=IDENTIFIER_REGEX, description="Column name"),
]
IndexName = Annotated[
    str,
    Path(max_length=MAX_IDENTIFIER_LENGTH, pattern=IDENTIFIER_REGEX, description="Index name"),
]
FunctionName = Annotated[
    str,
    Path(max_length=MAX_IDENTIFIER_LENGTH, pattern=IDENTIFIER_REGEX, description="Function name"),
]
SchemaName = Annotated[
    str,
    Query(max_length=MAX_IDENTIFIER_LENGTH, pattern=IDENTIFIER_REGEX, description="Schema name"),
]
