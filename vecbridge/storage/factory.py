"""Storage backend construction from settings."""

from vecbridge.config import StorageBackendType, StorageSettings, get_settings
from vecbridge.exceptions import ConfigurationError
from vecbridge.storage.base import EmbeddingStore
from vecbridge.storage.sql import SQLStorage
from vecbridge.storage.sqlite import SQLiteStorage


def create_storage(settings: StorageSettings | None = None) -> EmbeddingStore:
    """Build the configured storage backend.

    Args:
        settings: Storage configuration. Uses application settings if not provided.

    Returns:
        A ready-to-use backend.

    Raises:
        ConfigurationError: If the SQL backend is selected without a URL.
    """
    settings = settings or get_settings().storage

    if settings.backend == StorageBackendType.SQL:
        if settings.database_url is None:
            raise ConfigurationError(
                "STORAGE_DATABASE_URL is required for the sql backend",
                details={"backend": settings.backend.value},
            )
        return SQLStorage(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.pool_size,
        )

    return SQLiteStorage(settings.sqlite_path)
