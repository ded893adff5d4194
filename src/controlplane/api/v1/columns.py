"""Column endpoints for one table."""

from fastapi import APIRouter, status

from src.controlplane.api.dependencies import ColumnServiceDep, CurrentProject, WritableProject
from src.controlplane.api.v1.params import ColumnName, TableName
from src.controlplane.schemas.column import (
    Column,
    ColumnRename,
    ColumnsAlterRequest,
    ColumnsCreateRequest,
)

router = APIRouter(prefix="/tables/{table}/columns", tags=["columns"])


@router.get(
    "",
    response_model=list[Column],
    summary="List columns",
    responses={404: {"description": "Table not found"}},
)
async def list_columns(
    table: TableName, project: CurrentProject, service: ColumnServiceDep
) -> list[Column]:
    return await service.list_columns(project.db_name, table)


@router.post(
    "",
    response_model=list[Column],
    status_code=status.HTTP_201_CREATED,
    summary="Add columns",
    responses={422: {"description": "One or more columns already exist"}},
)
async def create_columns(
    table: TableName,
    request: ColumnsCreateRequest,
    project: WritableProject,
    service: ColumnServiceDep,
) -> list[Column]:
    return await service.create(project.db_name, table, request)


@router.patch(
    "",
    response_model=list[Column],
    summary="Change column types",
    responses={404: {"description": "One or more columns do not exist"}},
)
async def alter_columns(
    table: TableName,
    request: ColumnsAlterRequest,
    project: WritableProject,
    service: ColumnServiceDep,
) -> list[Column]:
    return await service.alter(project.db_name, table, request)


@router.put(
    "/{column}",
    response_model=list[Column],
    summary="Rename column",
    responses={
        404: {"description": "Column not found"},
        422: {"description": "Target name already exists"},
    },
)
async def rename_column(
    table: TableName,
    column: ColumnName,
    request: ColumnRename,
    project: WritableProject,
    service: ColumnServiceDep,
) -> list[Column]:
    return await service.rename(project.db_name, table, column, request)


@router.delete(
    "/{column}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Drop column",
    responses={404: {"description": "Column not found"}},
)
async def delete_column(
    table: TableName, column: ColumnName, project: WritableProject, service: ColumnServiceDep
) -> None:
    await service.delete(project.db_name, table, [column])
