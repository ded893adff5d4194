"""Row endpoints for tenant tables. Rows are addressed by a single-column primary key."""

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query, status

from src.controlplane.api.dependencies import CurrentProject, RowServiceDep, WritableProject
from src.controlplane.api.v1.params import TableName
from src.controlplane.schemas.row import RowCreate, RowPage, RowUpdate

router = APIRouter(prefix="/tables/{table}/rows", tags=["rows"])

RowKey = Annotated[str, Path(description="Primary key value")]


@router.get("", response_model=RowPage, summary="List rows")
async def list_rows(
    table: TableName,
    project: CurrentProject,
    service: RowServiceDep,
    limit: Annotated[int, Query(ge=1, le=1000, description="Max rows to return")] = 100,
    offset: Annotated[int, Query(ge=0, description="Rows to skip")] = 0,
) -> RowPage:
    return await service.list_rows(project.db_name, table, limit, offset)


@router.get(
    "/{key}",
    summary="Get row",
    responses={
        404: {"description": "Table or row not found"},
        422: {"description": "Table has no single-column primary key"},
    },
)
async def get_row(
    table: TableName, key: RowKey, project: CurrentProject, service: RowServiceDep
) -> dict[str, Any]:
    return await service.get(project.db_name, table, key)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Insert row",
    description="Returns the stored row, including defaulted columns.",
    responses={
        404: {"description": "Table not found"},
        422: {"description": "Unknown column"},
    },
)
async def create_row(
    table: TableName, request: RowCreate, project: WritableProject, service: RowServiceDep
) -> dict[str, Any]:
    return await service.create(project.db_name, table, request)


@router.patch(
    "/{key}",
    summary="Update row",
    responses={
        404: {"description": "Table or row not found"},
        422: {"description": "Unknown column or no single-column primary key"},
    },
)
async def update_row(
    table: TableName,
    key: RowKey,
    request: RowUpdate,
    project: WritableProject,
    service: RowServiceDep,
) -> dict[str, Any]:
    return await service.update(project.db_name, table, key, request)


@router.delete(
    "/{key}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete row",
    responses={404: {"description": "Table or row not found"}},
)
async def delete_row(
    table: TableName, key: RowKey, project: WritableProject, service: RowServiceDep
) -> None:
    await service.delete(project.db_name, table, key)
