"""Storage provider lookup by driver name."""

from typing import Any

from src.controlplane.core.config import STORAGE_DRIVERS, Settings, get_settings
from src.controlplane.core.logging import get_logger

# Provider modules register themselves on import
from src.controlplane.core.storage import backblaze, dropbox, s3  # noqa: F401
from src.controlplane.core.storage.base import ALL_STORAGE_PROVIDERS, StorageProvider

logger = get_logger(__name__)


def resolve_storage_driver(setting_value: str | None, settings: Settings | None = None) -> str:
    """Pick the driver from the storageDriver setting, falling back to config."""
    settings = settings or get_settings()
    if setting_value and setting_value in STORAGE_DRIVERS:
        return setting_value
    if setting_value:
        logger.warning(
            "Unknown storage driver setting, using configured default",
            action="storage",
            driver=setting_value,
            fallback=settings.storage_driver,
        )
    return settings.storage_driver


def get_storage_provider(
    name: str | None = None, settings: Settings | None = None, **kwargs: Any
) -> StorageProvider:
    """Build the provider registered under ``name`` (default: configured driver).

    Raises:
        ValueError: If no provider is registered under that name
    """
    settings = settings or get_settings()
    target_name = name or settings.storage_driver

    provider_cls = ALL_STORAGE_PROVIDERS.get(target_name)
    if provider_cls is None:
        available = sorted(ALL_STORAGE_PROVIDERS)
        raise ValueError(
            f"Storage provider '{target_name}' not registered. Available: {available}."
        )
    return provider_cls(settings, **kwargs)
