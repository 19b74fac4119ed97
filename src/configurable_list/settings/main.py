from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import ListBaseSettings
from .database import DatabaseSettings
from .log import LoggingSettings
from .query import QuerySettings


class _Settings(ListBaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    app_env: str = Field(
        default="dev",
        description="Deployment environment name (dev, qa, prod, local, ...)"
    )
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings,
        description="Database connection configuration"
    )
    query: QuerySettings = Field(
        default_factory=QuerySettings,
        description="Query rendering and SQL logging configuration"
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration"
    )


# Singleton instance
_settings: Optional[_Settings] = None


def get_settings(force_reload: bool = False) -> _Settings:
    """Get the singleton settings instance.

    Settings are loaded from environment variables (and ``.env``) on first
    access and shared afterwards.

    Args:
        force_reload: Create a new instance even if one already exists.
            Useful in tests or after environment variables change.

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()
        ```

    Note:
        Not thread-safe for the initial creation. Settings are expected to be
        loaded once at startup, before any list is evaluated.
    """
    global _settings

    if _settings is None or force_reload:
        _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings. Primarily for tests."""
    global _settings
    _settings = None
    return get_settings(force_reload=True)
