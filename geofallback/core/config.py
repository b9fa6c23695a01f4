"""Application configuration."""

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from geofallback.core.logging import LOG_LEVELS


class Settings(BaseSettings):
    """
    Geocoder settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    # Provider Settings
    GEOCODER_PLUGINS: list[str] = Field(
        default=["googlemaps"],
        description="Forward geocoding providers in priority order",
    )
    GEOCODER_REVERSE_PLUGINS: list[str] = Field(
        default=["googlemaps"],
        description="Reverse geocoding providers in priority order",
    )
    GEOCODER_PROVIDER_OPTIONS: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-provider constructor options keyed by provider id",
    )
    GEOCODER_TIMEOUT: int = Field(default=10, ge=1)
    GEOCODER_USER_AGENT: str = "geofallback"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True
    LOG_CHANNEL: str = "geocoder"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject log levels the logging setup does not know."""
        if value.lower() not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}"
            )
        return value.upper()

    @model_validator(mode="after")
    def normalize_plugin_ids(self) -> "Settings":
        """Lowercase provider ids so they match registry keys."""
        self.GEOCODER_PLUGINS = [p.strip().lower() for p in self.GEOCODER_PLUGINS]
        self.GEOCODER_REVERSE_PLUGINS = [
            p.strip().lower() for p in self.GEOCODER_REVERSE_PLUGINS
        ]
        self.GEOCODER_PROVIDER_OPTIONS = {
            plugin_id.lower(): dict(options)
            for plugin_id, options in self.GEOCODER_PROVIDER_OPTIONS.items()
        }
        return self


# Create settings instance
settings = Settings()
