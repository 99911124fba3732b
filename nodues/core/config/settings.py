# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
No-Dues notifier. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.
Provider credentials live in their own subsettings so they can be passed
explicitly into the messaging channels at construction time.

Example:
    >>> from nodues.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.reminders.timezone)
    'Asia/Kolkata'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBHOOK_SECRET = "change-this-in-production"


class DatabaseSettings(BaseSettings):
    """Database configuration for the fee records store.

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
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "nodues"
    password: SecretStr = SecretStr("nodues_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "nodues"
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the Dramatiq broker.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is None:
            return f"redis://{self.host}:{self.port}/{self.database}"
        pwd = self.password.get_secret_value()
        return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"


class FirebaseSettings(BaseSettings):
    """Firebase Cloud Messaging configuration.

    Attributes:
        credentials_path: Path to the service account JSON file.
        project_id: Firebase project ID.
        timeout: HTTP request timeout in seconds.
        web_icon: Icon shown by browsers for web push.
    """

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        extra="ignore",
    )

    credentials_path: str | None = None
    project_id: str | None = None
    timeout: float = 30.0
    web_icon: str = "/icons/Icon-192.png"

    @property
    def is_configured(self) -> bool:
        """Check whether credentials and project are both set."""
        return bool(self.credentials_path and self.project_id)


class SendGridSettings(BaseSettings):
    """SendGrid transactional email configuration.

    Attributes:
        api_key: SendGrid API key.
        from_email: Verified sender address.
        from_name: Sender display name.
        api_url: Mail send endpoint.
        timeout: HTTP request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="SENDGRID_",
        extra="ignore",
    )

    api_key: SecretStr | None = None
    from_email: str = "no-reply@apec-no-dues.web.app"
    from_name: str = "APEC No-Dues"
    api_url: str = "https://api.sendgrid.com/v3/mail/send"
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        """Check whether an API key is set."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class ReminderSettings(BaseSettings):
    """Deadline reminder job configuration.

    Attributes:
        offsets: Day offsets before a deadline at which reminders fire.
        timezone: Timezone for cron triggers and run dates.
        email_cron: Cron expression for the email reminder job.
        push_cron: Cron expression for the push reminder job.
        max_concurrency: Maximum concurrent sends per job run.
        dedup_enabled: Whether reminder sends are guarded by dedup keys.
        scheduler_enabled: Whether the cron scheduler is started.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        extra="ignore",
    )

    offsets: list[int] = Field(default_factory=lambda: [7, 3, 1])
    timezone: str = "Asia/Kolkata"
    email_cron: str = "0 9 * * *"
    push_cron: str = "0 10 * * *"
    max_concurrency: int = 10
    dedup_enabled: bool = True
    scheduler_enabled: bool = True

    @field_validator("max_concurrency")
    @classmethod
    def validate_concurrency(cls, value: int) -> int:
        """Require at least one concurrent send."""
        if value < 1:
            raise ValueError("max_concurrency must be at least 1")
        return value


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        webhook_secret: Shared secret expected in X-Webhook-Secret.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8080
    webhook_secret: SecretStr = SecretStr(DEFAULT_WEBHOOK_SECRET)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        app_name: Product name used in message copy.
        portal_url: Student portal URL linked from emails.
        database: Database settings.
        redis: Redis settings.
        firebase: Push provider settings.
        sendgrid: Email provider settings.
        reminders: Reminder job settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    app_name: str = "APEC Digital No-Dues"
    portal_url: str = "https://apec-no-dues.web.app"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    sendgrid: SendGridSettings = Field(default_factory=SendGridSettings)
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.api.webhook_secret.get_secret_value() == DEFAULT_WEBHOOK_SECRET:
                raise ValueError(
                    "Webhook secret must be changed from default in production. "
                    "Set API_WEBHOOK_SECRET environment variable."
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
