"""Async execution of host commands (container runtime invocations)."""

import asyncio
from typing import Protocol

from src.controlplane.core.exceptions import ContainerCommandError


class CommandRunner(Protocol):
    async def run(self, command: list[str]) -> None: ...

    async def run_with_output(self, command: list[str]) -> str: ...


class SubprocessRunner:
    """Runs commands with asyncio subprocesses.

    Arguments are passed as a list and never through a shell.
    """

    async def _exec(self, command: list[str]) -> str:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise ContainerCommandError(
                command, process.returncode, stderr.decode(errors="replace")
            )
        return stdout.decode(errors="replace")

    async def run(self, command: list[str]) -> None:
        await self._exec(command)

    async def run_with_output(self, command: list[str]) -> str:
        return await self._exec(command)
