"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from identity.domain.value_objects import TokenValidity


class DatabaseSettings(BaseSettings):
    """Database connection settings for the user store.

    Environment variables:
        CONTEXTUAL_DB_HOST: Database host (default: localhost)
        CONTEXTUAL_DB_PORT: Database port (default: 5432)
        CONTEXTUAL_DB_DATABASE: Database name (default: contextual_identity)
        CONTEXTUAL_DB_USERNAME: Database user (default: contextual)
        CONTEXTUAL_DB_PASSWORD: Database password (required in production)
        CONTEXTUAL_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        CONTEXTUAL_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTEXTUAL_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="contextual_identity", description="Database name")
    username: str = Field(default="contextual", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class IdentitySettings(BaseSettings):
    """Identity and consent domain settings.

    Environment variables:
        CONTEXTUAL_IDENTITY_DEFAULT_TOKEN_VALIDITY: Validity given to a new
            consent when the client does not ask for one (default: ONE_HOUR)
        CONTEXTUAL_IDENTITY_FALLBACK_TOKEN_VALIDITY: Validity reported for a
            client that holds no consent (default: ONE_DAY)
        CONTEXTUAL_IDENTITY_SERIALIZE_USER_WRITES: Serialize concurrent
            writes to the same user within the process (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTEXTUAL_IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_token_validity: TokenValidity = Field(
        default=TokenValidity.ONE_HOUR,
        description="Token validity for newly recorded consents",
    )
    fallback_token_validity: TokenValidity = Field(
        default=TokenValidity.ONE_DAY,
        description="Token validity when a client has no consent",
    )
    serialize_user_writes: bool = Field(
        default=True,
        description="Hold a per-user lock around read-modify-write use cases",
    )


class LoggingSettings(BaseSettings):
    """Logging settings.

    Environment variables:
        CONTEXTUAL_LOG_LEVEL: Minimum log level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTEXTUAL_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Minimum log level")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Accept standard level names in any case."""
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return normalized


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="Contextual Identity", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def identity(self) -> IdentitySettings:
        """Get identity domain settings."""
        return get_identity_settings()

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return get_logging_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_identity_settings() -> IdentitySettings:
    """Get cached identity settings."""
    return IdentitySettings()


@lru_cache
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()
