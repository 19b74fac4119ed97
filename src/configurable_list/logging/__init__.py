"""Logging infrastructure for configurable_list.

Structured JSON logging with request/list context and OpenTelemetry trace
correlation.
"""

from configurable_list.logging.filters import (
    ContextFilter,
    clear_request_context,
    set_request_context,
)
from configurable_list.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_request_context",
    "clear_request_context",
]
