"""Table endpoints. The target project comes from the X-Project header."""

from fastapi import APIRouter, status

from src.controlplane.api.dependencies import CurrentProject, TableServiceDep, WritableProject
from src.controlplane.api.v1.params import SchemaName, TableName
from src.controlplane.schemas.table import Table, TableCreate, TableDuplicate, TableRename

router = APIRouter(prefix="/tables", tags=["tables"])


@router.get("", response_model=list[Table], summary="List tables")
async def list_tables(
    project: CurrentProject, service: TableServiceDep, schema: SchemaName = "public"
) -> list[Table]:
    return await service.list_tables(project.db_name, schema)


@router.get(
    "/{table}",
    response_model=Table,
    summary="Get table",
    responses={404: {"description": "Table not found"}},
)
async def get_table(table: TableName, project: CurrentProject, service: TableServiceDep) -> Table:
    return await service.get(project.db_name, table)


@router.post(
    "",
    response_model=Table,
    status_code=status.HTTP_201_CREATED,
    summary="Create table",
    description=(
        "Creates the table and any foreign keys in one transaction: if a "
        "foreign key cannot be added the table is not created either."
    ),
    responses={422: {"description": "Table already exists or invalid columns"}},
)
async def create_table(
    request: TableCreate, project: WritableProject, service: TableServiceDep
) -> Table:
    return await service.create(project.db_name, request)


@router.put(
    "/{table}",
    response_model=Table,
    summary="Rename table",
    responses={
        404: {"description": "Table not found"},
        422: {"description": "Target name already exists"},
    },
)
async def rename_table(
    table: TableName, request: TableRename, project: WritableProject, service: TableServiceDep
) -> Table:
    return await service.rename(project.db_name, table, request)


@router.put(
    "/{table}/duplicate",
    response_model=Table,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate table",
    description="Copies columns and rows into a new table. Constraints and indexes are not copied.",
    responses={
        404: {"description": "Table not found"},
        422: {"description": "Target name already exists"},
    },
)
async def duplicate_table(
    table: TableName, request: TableDuplicate, project: WritableProject, service: TableServiceDep
) -> Table:
    return await service.duplicate(project.db_name, table, request)


@router.delete(
    "/{table}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Drop table",
    responses={404: {"description": "Table not found"}},
)
async def delete_table(
    table: TableName, project: WritableProject, service: TableServiceDep
) -> None:
    await service.delete(project.db_name, table)
