"""Request context for log records.

``evaluation_scope`` binds a request id and the list class name before a list
is evaluated and clears them afterwards. ``ContextFilter`` stamps both, with
the package version, on every record, so the query, execution and summary
lines of one evaluation share a ``request_id``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Optional

from configurable_list.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
list_name_var: ContextVar[Optional[str]] = ContextVar("list_name", default=None)


class ContextFilter(logging.Filter):
    """Stamps ``request_id``, ``list_name`` and ``package_version`` on records.

    Records are never dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, "request_id", request_id_var.get())
        setattr(record, "list_name", list_name_var.get())
        setattr(record, "package_version", __version__)
        return True


def set_request_context(
    request_id: Optional[str] = None,
    list_name: Optional[str] = None,
) -> None:
    """Bind the request id and list name for the current evaluation."""
    if request_id is not None:
        request_id_var.set(request_id)
    if list_name is not None:
        list_name_var.set(list_name)


def clear_request_context() -> None:
    """Unbind the evaluation's request id and list name."""
    request_id_var.set(None)
    list_name_var.set(None)
