from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SSL_MODES = ("disable", "prefer", "require", "verify-ca", "verify-full")
STORAGE_DRIVERS = ("s3", "dropbox", "backblaze")

DEFAULT_SEED_DIR = Path(__file__).resolve().parent.parent / "seeders" / "client"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "BaaS Control Plane"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True
    cors_origins: list[str] = ["http://localhost:3000"]

    # Control-plane database
    database_url: str
    database_migrations_url: str | None = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"
    database_statement_cache_size: int = 100

    # Tenant databases (one database per project, same RDBMS instance)
    tenant_database_host: str = "localhost"
    tenant_database_port: int = 5432
    tenant_database_user: str = "postgres"
    tenant_database_password: str = "postgres"
    tenant_database_ssl_mode: str = "disable"
    tenant_pool_size: int = 5  # idle connections kept per tenant engine
    tenant_max_overflow: int = 5  # pool_size + overflow = max open
    tenant_pool_recycle_seconds: int = 60
    tenant_seed_dir: Path = DEFAULT_SEED_DIR

    # Container runtime
    database_container_name: str = "baas_db"
    database_container_user: str = "postgres"
    postgrest_image: str = "postgrest/postgrest"
    postgrest_container_prefix: str = "postgrest"
    postgrest_network: str = "baas_network"
    postgrest_db_user: str = "postgres"
    postgrest_db_password: str = "postgres"
    postgrest_db_host: str = "baas_db"
    postgrest_default_schema: str = "public"
    postgrest_default_role: str = "web_anon"
    postgrest_jwt_secret: str = "change-me"
    base_domain: str = "localhost"
    custom_origins: str = "*"

    # Backups
    backup_tmp_dir: Path = Path("/tmp")
    backup_container_name: str = "baas-backups"

    # Storage
    storage_driver: str = "s3"  # used when the storageDriver setting row is missing
    storage_http_timeout_seconds: float = 30.0
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str = "eu-central-1"
    backblaze_key_id: str | None = None
    backblaze_application_key: str | None = None
    dropbox_access_token: str | None = None

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "main-queue"
    temporal_queue_prefix: str = "controlplane"
    temporal_queue_shards: int = 1

    # Shutdown
    shutdown_grace_period: int = 30

    @field_validator("database_ssl_mode", "tenant_database_ssl_mode")
    @classmethod
    def validate_ssl_mode(cls, v: str) -> str:
        if v not in SSL_MODES:
            raise ValueError(f"ssl mode must be one of {', '.join(SSL_MODES)}")
        return v

    @field_validator("storage_driver")
    @classmethod
    def validate_storage_driver(cls, v: str) -> str:
        if v not in STORAGE_DRIVERS:
            raise ValueError(f"storage_driver must be one of {', '.join(STORAGE_DRIVERS)}")
        return v

    @field_validator("temporal_queue_shards")
    @classmethod
    def validate_queue_shards(cls, v: int) -> int:
        if v < 1:
            raise ValueError("temporal_queue_shards must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
