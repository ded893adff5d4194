"""Shared Temporal client for the API process and operator CLIs."""

import asyncio

from temporalio.client import Client

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.logging import get_logger

logger = get_logger(__name__)

_client: Client | None = None
_connect_lock = asyncio.Lock()


async def get_temporal_client(settings: Settings | None = None) -> Client:
    """Connect on first use; concurrent first callers share one connection."""
    global _client
    if _client is not None:
        return _client
    async with _connect_lock:
        if _client is None:
            settings = settings or get_settings()
            logger.info(
                "Connecting to Temporal",
                host=settings.temporal_host,
                namespace=settings.temporal_namespace,
            )
            _client = await Client.connect(
                settings.temporal_host, namespace=settings.temporal_namespace
            )
    return _client


async def close_temporal_client() -> None:
    """Release the Temporal client. Call during shutdown.

    The SDK closes the underlying connection once the client is garbage collected.
    """
    global _client
    if _client is not None:
        logger.info("Releasing Temporal client")
        _client = None
