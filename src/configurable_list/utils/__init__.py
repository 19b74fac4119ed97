"""Utility functions and helpers for configurable_list."""

from configurable_list.utils.datetime import parse_db_datetime
from configurable_list.utils.decorators import retry_with_backoff, traced
from configurable_list.utils.sql import interpolate_sql_template, is_blank

__all__ = [
    "parse_db_datetime",
    "retry_with_backoff",
    "traced",
    "interpolate_sql_template",
    "is_blank",
]
