"""Application settings via pydantic-settings."""

import logging
import zoneinfo

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FATHOM_API_BASE_URL = "https://api.fathom.ai/external/v1"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FATHOM_")

    api_key: str = Field(
        min_length=1,
        description="Fathom API key, sent as the X-Api-Key header on every request.",
    )
    base_url: str = Field(
        default=FATHOM_API_BASE_URL, description="Base URL of the Fathom external API."
    )
    timeout: float = Field(
        default=30.0, gt=0, description="Connect/read timeout for API requests (seconds)."
    )
    log_level: str = Field(default="info", description="Logging level")
    timezone: str | None = Field(
        default=None,
        description=(
            "IANA timezone used when displaying timestamps. "
            "Defaults to the system's local timezone."
        ),
    )

    @field_validator("api_key")
    @classmethod
    def _strip_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("FATHOM_API_KEY must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().lower()
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value:
            try:
                zoneinfo.ZoneInfo(value)
            except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value or None
