"""structlog setup shared by the API, the Temporal worker and the CLI."""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, Processor, WrappedLogger

NOISY_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "temporalio": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
}


def _stamp_component(component: str) -> Processor:
    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("component", component)
        return event_dict

    return processor


def setup_logging(debug: bool = False, component: str = "api") -> None:
    """Configure structlog over stdlib logging.

    Every event carries ``component`` ("api", "worker" or "cli") so the
    processes can share one sink. Debug mode renders for a console, otherwise
    one JSON object per line. The CLI logs to stderr; stdout is its progress
    output.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr if component == "cli" else sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
        force=True,
    )
    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _stamp_component(component),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind the correlation id; a missing id binds nothing."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: UUID) -> None:
    """Bind the caller identified by the gateway."""
    bind_contextvars(user_id=str(user_id))


def bind_project_context(project_id: UUID, db_name: str | None = None) -> None:
    """Bind the project a request operates on.

    Args:
        project_id: The project resolved from the X-Project header.
        db_name: The tenant database backing the project, when known.
    """
    bind_contextvars(project_id=str(project_id))
    if db_name:
        bind_contextvars(db=db_name)


def clear_request_context() -> None:
    clear_contextvars()
