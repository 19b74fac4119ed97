from pydantic_settings import BaseSettings, SettingsConfigDict


class ListBaseSettings(BaseSettings):
    """Base class for every configurable_list settings section.

    Values are read from environment variables and an optional ``.env``
    file. Sections declare their own ``env_prefix``.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )
