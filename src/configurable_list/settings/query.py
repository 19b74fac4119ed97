from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import ListBaseSettings


class QuerySettings(ListBaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_sql: bool = Field(
        default=False,
        description="Log every rendered list query at DEBUG level"
    )
    sql_log_max_length: int = Field(
        default=500,
        ge=50,
        description="Number of SQL characters kept in log entries and error details"
    )
