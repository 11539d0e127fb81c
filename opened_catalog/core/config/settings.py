# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the OpenEd
catalog tools. Settings are loaded from environment variables with sensible
defaults.

The Settings class is the main entry point and aggregates all subsettings.
Services receive the settings they need at construction; get_settings() is
only meant for outer entry points such as background actors.

Example:
    >>> from opened_catalog.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.export.page_size)
    10
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogDatabaseSettings(BaseSettings):
    """Catalog database configuration.

    The catalog database is a read follower of the OpenEd database and
    holds resources, standards, alignments and subject associations.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_DB_",
        extra="ignore",
    )

    user: str = "opened"
    password: SecretStr = SecretStr("opened_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "opened"
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the ratings namespace.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password (empty for no auth).
        database: Redis database number.
        max_connections: Maximum connection pool size.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0
    max_connections: int = 10

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        if pwd:
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class StorageSettings(BaseSettings):
    """Report storage configuration.

    Attributes:
        backend: Storage backend, "s3" for object storage or "local" for disk.
        bucket: S3 bucket receiving exported reports.
        region: AWS region.
        endpoint_url: Optional endpoint for S3-compatible services.
        access_key: Optional access key (falls back to the boto3 chain).
        secret_key: Optional secret key (falls back to the boto3 chain).
        local_path: Directory used by the local backend.
    """

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore",
        populate_by_name=True,
    )

    backend: Literal["s3", "local"] = "s3"
    bucket: str = Field(
        default="opened-reports",
        validation_alias=AliasChoices("STORAGE_BUCKET", "AWS_S3_BUCKET"),
    )
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key: SecretStr | None = None
    secret_key: SecretStr | None = None
    local_path: str = "./reports"


class PartnerAPISettings(BaseSettings):
    """OpenEd partner API configuration.

    Attributes:
        base_uri: Partner API base URI.
        client_id: OAuth client id used to obtain tokens.
        client_secret: OAuth client secret.
        username: Partner username the token is issued for.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARTNER_",
        extra="ignore",
    )

    base_uri: str = "https://partner.opened.com"
    client_id: str = ""
    client_secret: SecretStr = SecretStr("")
    username: str = ""
    timeout: float = 30.0


class ExportSettings(BaseSettings):
    """Ratings export configuration.

    Attributes:
        key_pattern: Glob pattern selecting rating hashes.
        page_size: COUNT hint passed to each SCAN step.
        report_suffix: Fixed suffix appended to the run selector.
        report_header: First line of every report.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_",
        extra="ignore",
    )

    key_pattern: str = "resource:*"
    page_size: int = Field(default=10, gt=0)
    report_suffix: str = "ratings.csv"
    report_header: str = "Resource,Rating"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        catalog_db: Catalog database settings.
        redis: Redis settings.
        storage: Report storage settings.
        partner: Partner API settings.
        export: Ratings export settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    catalog_db: CatalogDatabaseSettings = Field(default_factory=CatalogDatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    partner: PartnerAPISettings = Field(default_factory=PartnerAPISettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with the local report backend.
        """
        if self.environment == "production" and self.storage.backend == "local":
            raise ValueError(
                "Local report storage is not allowed in production. "
                "Set STORAGE_BACKEND=s3."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
