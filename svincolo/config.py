"""Configuration loading for the player release notifier.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings

BOT_TOKEN, DISCORD_CHANNEL_ID and API_SECRET are required; the process
refuses to start without them.
"""

from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord configuration
    bot_token: str = Field(
        description="Discord bot token used for the gateway session",
    )
    discord_channel_id: str = Field(
        description="Channel that receives player release notifications",
    )
    discord_api_url: str = Field(
        default="https://discord.com/api/v10",
        description="Discord REST API base URL",
    )
    dispatch_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for resolving the channel and sending a notification",
    )

    # Webhook configuration
    api_secret: str = Field(
        description="Shared secret expected as the webhook Bearer token",
    )
    port: int = Field(
        default=3000,
        description="Port to listen on for the webhook server",
    )

    # Formatting
    display_timezone: str = Field(
        default="Europe/Rome",
        description="IANA timezone used to display release dates",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("bot_token", "discord_channel_id", "api_secret")
    @classmethod
    def validate_required_value(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Ensure port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("dispatch_timeout_seconds")
    @classmethod
    def validate_dispatch_timeout(cls, v: float) -> float:
        """Ensure dispatch timeout is positive."""
        if v <= 0:
            raise ValueError("dispatch_timeout_seconds must be positive")
        return v

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Ensure the timezone name is known to zoneinfo."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v

    @property
    def display_tzinfo(self) -> ZoneInfo:
        """The display timezone as a tzinfo."""
        return ZoneInfo(self.display_timezone)


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If a required value is missing or validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "load_settings"]
