"""Shared data access for control-plane models."""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel
from sqlmodel.sql.expression import SelectOfScalar

from src.controlplane.schemas.pagination import PageCursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Data access for one control-plane model.

    Repositories never commit; services own the transaction.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        return await self.session.get(self.model, id)

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)

    async def paginate(
        self,
        query: SelectOfScalar[ModelType],
        cursor: str | None,
        limit: int,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run ``query`` newest first, one page at a time.

        The model must have ``created_at`` and ``id`` columns.

        Returns:
            Tuple of (items, next_cursor, has_more)

        Raises:
            BadRequestError: If the cursor cannot be decoded
        """
        created_at = self.model.created_at  # type: ignore[attr-defined]
        id_ = self.model.id  # type: ignore[attr-defined]

        if cursor:
            position = PageCursor.decode(cursor)
            query = query.where(tuple_(created_at, id_) < (position.created_at, position.id))

        result = await self.session.execute(
            query.order_by(created_at.desc(), id_.desc()).limit(limit + 1)
        )
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if not has_more:
            return items, None, False

        items = items[:limit]
        last = items[-1]
        next_cursor = PageCursor(created_at=last.created_at, id=last.id).encode()  # type: ignore[attr-defined]
        return items, next_cursor, True
