"""In-memory stand-ins for tenant connections and the container runtime."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from src.controlplane.core.exceptions import ContainerCommandError


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]] | None = None, scalar: Any = None):
        self.rows = rows or []
        self.scalar = scalar

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return self.rows

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None

    def scalar_one(self) -> Any:
        return self.scalar


class FakeConnection:
    """Records every statement; answers queries from a queue of results."""

    def __init__(self, owner: "FakeTenantConnection"):
        self.owner = owner

    async def execute(self, statement: Any, params: dict[str, Any] | None = None) -> FakeResult:
        self.owner.queries.append((str(statement), dict(params or {})))
        if self.owner.results:
            return self.owner.results.pop(0)
        return FakeResult()

    async def exec_driver_sql(self, statement: str) -> None:
        self.owner.ddl.append(statement)
        if self.owner.fail_on is not None and self.owner.fail_on(statement):
            raise self.owner.error


class FakeTenantConnection:
    """Duck-typed TenantConnection.

    ``transactions`` counts ``begin()`` calls; DDL statements issued inside
    one transaction land in ``ddl`` in order.
    """

    def __init__(self, results: list[FakeResult] | None = None):
        self.db_name = "udb_test"
        self.results = list(results or [])
        self.queries: list[tuple[str, dict[str, Any]]] = []
        self.ddl: list[str] = []
        self.transactions = 0
        self.closed = False
        self.fail_on = None
        self.error: Exception | None = None

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator[FakeConnection]:
        self.transactions += 1
        yield FakeConnection(self)

    @asynccontextmanager
    async def autocommit(self) -> AsyncGenerator[FakeConnection]:
        yield FakeConnection(self)

    async def close(self) -> None:
        self.closed = True

    async def __aenter__(self) -> "FakeTenantConnection":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class FakeCommandRunner:
    """CommandRunner that records commands and fails the ones it is told to."""

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        failures: dict[str, str] | None = None,
    ):
        self.commands: list[list[str]] = []
        self.outputs = outputs or {}
        self.failures = failures or {}

    def _check(self, command: list[str]) -> None:
        self.commands.append(command)
        verb = command[1] if len(command) > 1 else command[0]
        if verb in self.failures:
            raise ContainerCommandError(command, 1, self.failures[verb])

    async def run(self, command: list[str]) -> None:
        self._check(command)

    async def run_with_output(self, command: list[str]) -> str:
        self._check(command)
        verb = command[1] if len(command) > 1 else command[0]
        return self.outputs.get(verb, "")

    def verbs(self) -> list[str]:
        return [command[1] for command in self.commands]


class FakeContainerRuntime(FakeCommandRunner):
    """A docker CLI that remembers which containers exist and their state.

    ``containers`` maps container name to ``"running"`` or ``"exited"``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.containers: dict[str, str] = {}

    def _fail(self, command: list[str], stderr: str) -> None:
        raise ContainerCommandError(command, 1, stderr)

    async def run(self, command: list[str]) -> None:
        self.commands.append(command)
        verb, name = command[1], command[-1]
        if verb == "run":
            name = command[command.index("--name") + 1]
            if name in self.containers:
                self._fail(command, f'Conflict. The container name "/{name}" is already in use')
            self.containers[name] = "running"
        elif name not in self.containers:
            self._fail(command, f"Error response from daemon: No such container: {name}")
        elif verb == "stop":
            self.containers[name] = "exited"
        elif verb == "rm":
            if self.containers[name] == "running":
                self._fail(command, "You cannot remove a running container. Stop the container first")
            del self.containers[name]

    async def run_with_output(self, command: list[str]) -> str:
        self.commands.append(command)
        name = command[-1]
        if name not in self.containers:
            self._fail(command, f"Error: No such object: {name}")
        return f"{self.containers[name]}\n"

    def exit(self, name: str) -> None:
        """Simulate a host reboot: the container stays but stops running."""
        self.containers[name] = "exited"
