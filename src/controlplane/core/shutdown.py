"""In-flight request accounting for graceful shutdown.

Tenant DDL runs inside the request, so the API waits for running requests
before it disposes the control-plane engine.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.controlplane.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._idle = asyncio.Condition()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        async with self._idle:
            self._in_flight += 1
        try:
            yield
        finally:
            async with self._idle:
                self._in_flight -= 1
                if self._in_flight == 0:
                    self._idle.notify_all()

    async def drain(self, timeout: float) -> bool:
        """Stop accepting new work and wait for running requests.

        Returns:
            True if every request finished within ``timeout`` seconds
        """
        self._shutting_down = True
        logger.info("Draining requests", in_flight=self._in_flight)
        try:
            async with asyncio.timeout(timeout):
                async with self._idle:
                    await self._idle.wait_for(lambda: self._in_flight == 0)
        except TimeoutError:
            logger.warning(
                "Shutdown timeout, requests still running",
                timeout=timeout,
                in_flight=self._in_flight,
            )
            return False
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._idle = asyncio.Condition()


request_tracker = RequestTracker()
