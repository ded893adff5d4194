"""PostgREST container orchestration through the docker CLI."""

from sqlalchemy import URL

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.exceptions import ContainerCommandError
from src.controlplane.core.logging import get_logger
from src.controlplane.core.process import CommandRunner, SubprocessRunner

logger = get_logger(__name__)

POSTGREST_PORT = 3000
MISSING_CONTAINER_ERRORS = ("No such object", "No such container")
CORS_ALLOWED_METHODS = "GET,POST,PATCH,PUT,DELETE,OPTIONS,HEAD"


class PostgrestOrchestrator:
    """Starts, removes and inspects the per-tenant PostgREST container.

    Container names are derived from the tenant database name, so no
    lookup table is kept. Starting twice without checking ``has_container``
    first fails with the runtime's own name-conflict error.
    """

    def __init__(self, settings: Settings | None = None, runner: CommandRunner | None = None):
        self.settings = settings or get_settings()
        self.runner = runner or SubprocessRunner()

    def container_name(self, db_name: str) -> str:
        return f"{self.settings.postgrest_container_prefix}_{db_name}"

    def build_start_command(self, db_name: str, host_port: int | None = None) -> list[str]:
        s = self.settings
        db_uri = URL.create(
            "postgres",
            username=s.postgrest_db_user,
            password=s.postgrest_db_password,
            host=s.postgrest_db_host,
            database=db_name,
        ).render_as_string(hide_password=False)
        router = f"traefik.http.routers.{db_name}"

        command = [
            "docker", "run", "-d",
            "--name", self.container_name(db_name),
            "--network", s.postgrest_network,
        ]  # fmt: skip
        if host_port is not None:
            command += ["-p", f"{host_port}:{POSTGREST_PORT}"]
        command += [
            "-e", f"PGRST_DB_URI={db_uri}",
            "-e", f"PGRST_DB_ANON_ROLE={s.postgrest_default_role}",
            "-e", f"PGRST_DB_SCHEMA={s.postgrest_default_schema}",
            "-e", f"PGRST_JWT_SECRET={s.postgrest_jwt_secret}",
            "-e", f"PGRST_SERVER_CORS_ALLOWED_ORIGINS={s.custom_origins}",
            "-e", "PGRST_SERVER_CORS_ALLOWED_HEADERS=*",
            "-e", f"PGRST_SERVER_CORS_ALLOWED_METHODS={CORS_ALLOWED_METHODS}",
            "--label", "traefik.enable=true",
            "--label", f"{router}.rule=Host(`{db_name}.{s.base_domain}`)",
            "--label", f"traefik.http.services.{db_name}.loadbalancer.server.port={POSTGREST_PORT}",
            "--label", f"{router}.entrypoints=websecure",
            "--label", f"{router}.tls=true",
            "--label", f"{router}.tls.certresolver=le",
            s.postgrest_image,
        ]  # fmt: skip
        return command

    async def start_container(self, db_name: str, host_port: int | None = None) -> None:
        """Run the container detached.

        Raises:
            ContainerCommandError: If the runtime rejects the run command
        """
        try:
            await self.runner.run(self.build_start_command(db_name, host_port))
        except ContainerCommandError as e:
            logger.error(
                "Failed to start container",
                action="postgrest",
                db=db_name,
                error=e.stderr,
            )
            raise
        logger.info("Container started", action="postgrest", db=db_name)

    async def remove_container(self, db_name: str) -> None:
        """Stop then remove the container. Each step's failure is logged, not raised."""
        name = self.container_name(db_name)
        for verb in ("stop", "rm"):
            try:
                await self.runner.run(["docker", verb, name])
            except ContainerCommandError as e:
                logger.error(
                    f"Failed to {verb} container",
                    action="postgrest",
                    db=db_name,
                    container=name,
                    error=e.stderr,
                )

    async def has_container(self, db_name: str) -> bool:
        """True when the container exists, whether running or stopped.

        A stopped container still holds its name, so it must be removed
        before the next start.
        """
        command = ["docker", "inspect", "--format={{.State.Status}}", self.container_name(db_name)]
        try:
            status = await self.runner.run_with_output(command)
        except ContainerCommandError as e:
            if any(marker in e.stderr for marker in MISSING_CONTAINER_ERRORS):
                logger.debug("Container not found", action="postgrest", db=db_name)
            else:
                logger.error(
                    "Failed to check if container exists",
                    action="postgrest",
                    db=db_name,
                    error=e.stderr,
                )
            return False
        logger.debug("Container found", action="postgrest", db=db_name, status=status.strip())
        return True
