"""Caller identity from the trusted gateway.

Authentication happens upstream; the gateway forwards the verified user id
in ``X-User-ID``. This layer only parses it and binds it to the log context.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.controlplane.core.logging import bind_user_context


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> UUID:
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )
    try:
        user_id = UUID(x_user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is not a valid UUID",
        ) from e

    bind_user_context(user_id)
    return user_id


CurrentUserID = Annotated[UUID, Depends(get_current_user_id)]
