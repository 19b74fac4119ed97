"""Log output for list evaluations.

Every module logs through ``get_logger(__name__)``. The events an evaluation
emits are ``list.evaluate`` and ``list.sql`` (DEBUG), ``list.evaluated`` (INFO)
and ``list.no_columns`` (WARNING), plus the database collaborator's
``List query executed`` and ``List query failed`` entries. Their ``extra``
fields (columns, join count, row and total counts, durations) become JSON keys.
``setup_logging`` installs one stdout handler through ``dictConfig``, either
JSON lines or a plain text format carrying the request id.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from opentelemetry import trace


def _build_reserved_keys() -> Set[str]:
    """Collect standard ``LogRecord`` attributes to avoid duplicating them."""
    blank = logging.LogRecord(
        name="configurable_list",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    )
    reserved = set(blank.__dict__.keys())
    reserved.update({"asctime", "message"})
    return reserved


_RESERVED_LOG_RECORD_KEYS = _build_reserved_keys()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Formats each record as one JSON object.

    Keys are the record's ``extra`` fields plus timestamp, level, logger and
    message. The active span's trace and span ids are added when a span is
    recording, and the formatted exception when there is one.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {}

        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_RECORD_KEYS:
                log_record[key] = value

        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure logging backed by ``logging.config.dictConfig``.

    Args:
        level: Base log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``LoggingSettings.level``.
        json_output: Emit JSON lines. Defaults to ``LoggingSettings.json_output``.
    """
    if level is None or json_output is None:
        from configurable_list.settings import get_settings
        log_settings = get_settings().logging
        level = level or log_settings.level
        json_output = log_settings.json_output if json_output is None else json_output

    formatter: Dict[str, Any]
    if json_output:
        formatter = {"()": "configurable_list.logging.logger.CustomJsonFormatter"}
    else:
        formatter = {"format": "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"}

    config_dict: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "list_formatter": formatter,
        },
        "filters": {
            "list_context": {
                "()": "configurable_list.logging.filters.ContextFilter",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level.upper(),
                "formatter": "list_formatter",
                "filters": ["list_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(config_dict)
