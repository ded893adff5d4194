"""Index endpoints for one table."""

from fastapi import APIRouter, status

from src.controlplane.api.dependencies import CurrentProject, IndexServiceDep, WritableProject
from src.controlplane.api.v1.params import IndexName, TableName
from src.controlplane.schemas.index import Index, IndexCreate

router = APIRouter(prefix="/tables/{table}/indexes", tags=["indexes"])


@router.get("", response_model=list[Index], summary="List indexes")
async def list_indexes(
    table: TableName, project: CurrentProject, service: IndexServiceDep
) -> list[Index]:
    return await service.list_indexes(project.db_name, table)


@router.get(
    "/{index}",
    response_model=Index,
    summary="Get index",
    responses={404: {"description": "Index not found"}},
)
async def get_index(
    table: TableName, index: IndexName, project: CurrentProject, service: IndexServiceDep
) -> Index:
    return await service.get(project.db_name, table, index)


@router.post(
    "",
    response_model=Index,
    status_code=status.HTTP_201_CREATED,
    summary="Create index",
    responses={
        404: {"description": "Table or column not found"},
        422: {"description": "Index already exists"},
    },
)
async def create_index(
    table: TableName, request: IndexCreate, project: WritableProject, service: IndexServiceDep
) -> Index:
    return await service.create(project.db_name, table, request)


@router.delete(
    "/{index}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Drop index",
    responses={404: {"description": "Index not found"}},
)
async def delete_index(
    table: TableName, index: IndexName, project: WritableProject, service: IndexServiceDep
) -> None:
    await service.delete(project.db_name, table, index)
