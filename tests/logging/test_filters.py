import json
import logging

from configurable_list import ConfigurableList
from configurable_list.__version__ import __version__
from configurable_list.logging import (
    ContextFilter,
    CustomJsonFormatter,
    clear_request_context,
    set_request_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="sample",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_filter_uses_request_context():
    set_request_context(request_id="req-1", list_name="OrderList")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.list_name == "OrderList"
        assert record.package_version == __version__
    finally:
        clear_request_context()


def test_context_filter_without_context_is_graceful():
    clear_request_context()
    record = _record()
    assert ContextFilter().filter(record)
    assert record.request_id is None
    assert record.list_name is None


def test_partial_update_keeps_other_values():
    set_request_context(request_id="req-2", list_name="A")
    try:
        set_request_context(list_name="B")
        record = _record()
        ContextFilter().filter(record)
        assert (record.request_id, record.list_name) == ("req-2", "B")
    finally:
        clear_request_context()


def test_json_formatter_includes_extras():
    record = _record(row_count="3")
    payload = json.loads(CustomJsonFormatter().format(record))
    assert payload["message"] == "sample"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["row_count"] == "3"
    assert "trace_id" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        import sys
        record = logging.LogRecord("test.logger", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(CustomJsonFormatter().format(record))
    assert "ValueError: bad" in payload["exception"]


def test_evaluation_records_share_request_context(caplog, mock_database, settings):
    class ContextList(ConfigurableList):
        pass

    ContextList.base_table("orders")
    ContextList.column("number", "orders.number")

    context_filter = ContextFilter()
    caplog.handler.addFilter(context_filter)
    try:
        with caplog.at_level(logging.DEBUG, logger="configurable_list"):
            ContextList(mock_database, settings=settings).evaluate(["number"], request_id="req-42")
    finally:
        caplog.handler.removeFilter(context_filter)

    records = [r for r in caplog.records if r.getMessage() in ("list.evaluate", "list.evaluated")]
    assert [r.getMessage() for r in records] == ["list.evaluate", "list.evaluated"]
    assert {(r.request_id, r.list_name) for r in records} == {("req-42", "ContextList")}

    after = _record()
    ContextFilter().filter(after)
    assert after.request_id is None
