"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class StorageBackendType(str, Enum):
    """Available storage backends."""

    SQLITE = "sqlite"
    SQL = "sql"


class OpenAISettings(BaseSettings):
    """Completion and embedding service configuration.

    Works with the OpenAI API or any endpoint speaking the same protocol.
    """

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="API base URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Bearer token for the API (required)",
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        description="Chat completion model",
    )
    embedding_model: str = Field(
        default="text-embedding-ada-002",
        description="Embedding model",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )


class PineconeSettings(BaseSettings):
    """Vector database configuration."""

    model_config = SettingsConfigDict(env_prefix="PINECONE_")

    index_url: str = Field(
        default="http://localhost:5080/",
        description="Base URL of the vector index",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Api-Key header value (required)",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )


class StorageSettings(BaseSettings):
    """Text and embedding storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: StorageBackendType = Field(
        default=StorageBackendType.SQLITE,
        description="Which storage backend to construct",
    )
    sqlite_path: str = Field(
        default="data/vecbridge.db",
        description="Path of the embedded SQLite database file",
    )
    database_url: SecretStr | None = Field(
        default=None,
        description="SQLAlchemy URL of the networked database",
    )
    pool_size: int = Field(
        default=5,
        description="Connection pool size for the networked database",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Log SQL statements from the relational backend",
    )

    # Nested settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    pinecone: PineconeSettings = Field(default_factory=PineconeSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
