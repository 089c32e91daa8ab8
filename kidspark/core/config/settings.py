# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for KidSpark.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from kidspark.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_PASSWORD = "change-this-in-production"


class DatabaseSettings(BaseSettings):
    """Relational datastore configuration.

    Any SQLAlchemy async URL is accepted. PostgreSQL (asyncpg) is the
    production target; SQLite (aiosqlite) is used for development and tests.

    Attributes:
        url: Async database URL.
        pool_size: Connection pool size (ignored by SQLite).
        max_overflow: Maximum overflow connections (ignored by SQLite).
        echo: Log every SQL statement.
        auto_create: Create missing tables at startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    url: str = "sqlite+aiosqlite:///./kidspark.db"
    pool_size: int = 10
    max_overflow: int = 20
    echo: bool = False
    auto_create: bool = True

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured backend is SQLite."""
        return self.url.startswith("sqlite")


class CredentialSettings(BaseSettings):
    """Family access password hashing configuration.

    Attributes:
        iterations: PBKDF2 iteration count for newly hashed passwords.
        salt_bytes: Length of the random salt.
        key_bytes: Length of the derived key.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDENTIAL_",
        extra="ignore",
    )

    iterations: int = Field(default=100_000, ge=1)
    salt_bytes: int = Field(default=16, ge=16)
    key_bytes: int = Field(default=32, ge=16)


class AdminSettings(BaseSettings):
    """Administrator (CMS) password configuration.

    Either a bcrypt hash or a plaintext password may be given. When both
    are set the hash wins.

    Attributes:
        password: Plaintext administrator password (development only).
        password_hash: bcrypt hash of the administrator password.
        bcrypt_rounds: Rounds used when hashing the plaintext password.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        extra="ignore",
    )

    password: SecretStr = SecretStr(DEFAULT_ADMIN_PASSWORD)
    password_hash: SecretStr | None = None
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


class SessionSettings(BaseSettings):
    """Session lifetime and cookie configuration.

    Attributes:
        admin_ttl_hours: Administrator session lifetime.
        kid_ttl_days: Kid session lifetime.
        admin_cookie: Name of the administrator session cookie.
        kid_cookie: Name of the kid session cookie.
        cookie_secure: Add the Secure attribute to session cookies.
        token_bytes: Random bytes per session token.
    """

    model_config = SettingsConfigDict(
        env_prefix="SESSION_",
        extra="ignore",
    )

    admin_ttl_hours: int = 24
    kid_ttl_days: int = 7
    admin_cookie: str = "ks_admin"
    kid_cookie: str = "ks_session"
    cookie_secure: bool = False
    token_bytes: int = Field(default=32, ge=16)

    @property
    def admin_ttl_seconds(self) -> int:
        """Administrator session lifetime in seconds."""
        return self.admin_ttl_hours * 3600

    @property
    def kid_ttl_seconds(self) -> int:
        """Kid session lifetime in seconds."""
        return self.kid_ttl_days * 86400


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class ProgressClientSettings(BaseSettings):
    """Caller-side progress sync configuration.

    Attributes:
        base_url: Base URL of the KidSpark API.
        debounce_seconds: Quiet period before a buffered patch is sent.
        timeout_seconds: Transport timeout for progress writes.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROGRESS_",
        extra="ignore",
    )

    base_url: str = "http://localhost:8000"
    debounce_seconds: float = Field(default=2.0, gt=0)
    timeout_seconds: float = 10.0


class Settings(BaseSettings):
    """Main application settings.

    This is the primary configuration class for KidSpark.
    All subsettings are loaded from their respective environment prefixes.

    Attributes:
        environment: Deployment environment.
        debug: Enable debug mode.
        log_level: Logging level.
        database: Datastore settings.
        credential: Family password hashing settings.
        admin: Administrator password settings.
        session: Session and cookie settings.
        cors: CORS settings.
        progress_client: Caller-side progress sync settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "test", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    credential: CredentialSettings = Field(default_factory=CredentialSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    progress_client: ProgressClientSettings = Field(default_factory=ProgressClientSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production" and self.admin.password_hash is None:
            if self.admin.password.get_secret_value() == DEFAULT_ADMIN_PASSWORD:
                raise ValueError(
                    "Admin password must be changed from default in production. "
                    "Set ADMIN_PASSWORD_HASH or ADMIN_PASSWORD environment variable."
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

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
