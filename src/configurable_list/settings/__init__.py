"""Settings for configurable_list, built on Pydantic Settings.

Each section lives in its own module and reads its own environment
variable prefix:

    - database.py: ``DATABASE_*`` connection and pool configuration
    - query.py: ``QUERY_*`` SQL logging behaviour
    - log.py: ``LOG_*`` log level and output format
    - main.py: ``_Settings`` aggregator, ``get_settings()`` singleton

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file
    3. Default Values in code (lowest priority)

Quick Start:
    >>> from configurable_list.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database.pool_size
    5
"""

from .main import _Settings, get_settings, _reload_settings
from .base import ListBaseSettings
from .database import DatabaseSettings
from .query import QuerySettings
from .log import LoggingSettings

__all__ = [
    "get_settings",
    "ListBaseSettings",
    "DatabaseSettings",
    "QuerySettings",
    "LoggingSettings",
]
