"""Domain error taxonomy and exception handlers with request_id in responses."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.controlplane.core.logging import get_logger

logger = get_logger(__name__)


class ControlPlaneError(Exception):
    """Base class for errors surfaced to callers with a message key."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ControlPlaneError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ControlPlaneError):
    status_code = status.HTTP_403_FORBIDDEN


class UnprocessableError(ControlPlaneError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class BadRequestError(ControlPlaneError):
    status_code = status.HTTP_400_BAD_REQUEST


class ContainerCommandError(Exception):
    """A container runtime invocation exited non-zero."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"command '{' '.join(command[:2])}' exited with {returncode}: {self.stderr}"
        )


class StorageError(Exception):
    """An object-storage provider rejected a request."""


def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(ControlPlaneError)
    async def control_plane_exception_handler(
        request: Request, exc: ControlPlaneError
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(DBAPIError)
    async def database_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
        # DDL failures are returned to the caller as-is, never retried
        logger.warning(
            "Database error",
            path=request.url.path,
            error=str(exc.orig),
        )
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc.orig))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
