from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from .base import ListBaseSettings

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(ListBaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=True, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate that the level is a standard logging level name."""
        normalized = v.strip().upper()
        if normalized not in _LEVELS:
            raise ValueError(f"Unknown log level: {v}. Use one of {', '.join(_LEVELS)}")
        return normalized
