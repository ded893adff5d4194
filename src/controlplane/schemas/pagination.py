"""Keyset pagination over (created_at, id)."""

import base64
import json
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

from src.controlplane.core.exceptions import BadRequestError


class PageCursor(BaseModel):
    """Position after the last row of a page.

    ``created_at`` alone is not unique (bulk imports and the restart CLI see
    many projects created in the same transaction), so the row id breaks ties.
    """

    created_at: datetime
    id: UUID

    def encode(self) -> str:
        return base64.urlsafe_b64encode(self.model_dump_json().encode()).decode()

    @classmethod
    def decode(cls, token: str) -> "PageCursor":
        try:
            return cls.model_validate(json.loads(base64.urlsafe_b64decode(token.encode())))
        except ValueError as e:
            raise BadRequestError("pagination.error.invalidCursor") from e


ItemType = TypeVar("ItemType")


class PaginatedResponse(BaseModel, Generic[ItemType]):
    """One page of results, newest first.

    ``next_cursor`` is opaque to clients; pass it back unchanged to get the
    following page.
    """

    items: list[ItemType]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page, absent on the last page",
    )
    has_more: bool = False
