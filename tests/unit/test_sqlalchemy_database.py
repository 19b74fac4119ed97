"""Tests for the SQLAlchemy database collaborator, including end-to-end list evaluation on SQLite."""

from datetime import datetime
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from configurable_list import ConfigurableList, SQLAlchemyDatabase
from configurable_list.common.exceptions import ErrorCode, ListError
from configurable_list.database import escape_string_literal
from configurable_list.protocols import Database
from configurable_list.settings.main import _reload_settings


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE regions (id INTEGER PRIMARY KEY, name TEXT)"))
        conn.execute(text("CREATE TABLE customers (id INTEGER PRIMARY KEY, name TEXT, region_id INTEGER)"))
        conn.execute(text(
            "CREATE TABLE orders (id INTEGER PRIMARY KEY, number TEXT, customer_id INTEGER, "
            "amount REAL, placed_at TEXT, paid TEXT, deleted INTEGER)"
        ))
        conn.execute(text("INSERT INTO regions VALUES (1, 'North'), (2, 'South')"))
        conn.execute(text(
            "INSERT INTO customers VALUES (1, 'Acme', 1), (2, 'O''Brien Ltd', 2), (3, 'Zeta', 2)"
        ))
        conn.execute(text(
            "INSERT INTO orders VALUES "
            "(1, 'A-001', 1, 10.5, '2020-01-01 10:00:00', 'TRUE', 0), "
            "(2, 'A-002', 2, 20.0, '2020-01-02 11:30:00.250000', 'FALSE', 0), "
            "(3, 'A-003', 3, 30.0, '2020-01-03 09:15:00', 'TRUE', 0), "
            "(4, 'A-004', 1, 40.0, '2020-01-04 08:00:00', 'TRUE', 1), "
            "(5, 'A-005', 2, NULL, '2020-01-05 17:45:00', 'TRUE', 0)"
        ))
    yield engine
    engine.dispose()


@pytest.fixture
def database(engine, settings):
    return SQLAlchemyDatabase(engine=engine, settings=settings)


@pytest.fixture
def orders(database, settings):
    class OrderList(ConfigurableList):
        pass

    OrderList.base_table("orders")
    OrderList.column("number", "orders.number", human_name="Number")
    OrderList.column("customer", "customers.name", require_join="customers", filter="LIKE '%%%s%%'", filter_group="who")
    OrderList.column("region", "regions.name", require_join="regions", filter="LIKE '%%%s%%'", filter_group="who")
    OrderList.column("amount", "orders.amount", datatype="float", filter=">= %s")
    OrderList.column("placed_at", "orders.placed_at", datatype="datetime")
    OrderList.column(
        "paid",
        "orders.paid",
        datatype="boolean",
        filters=[
            {"value": "yes", "condition": "= 'TRUE'", "human_name": "Paid"},
            {"value": "no", "condition": "= 'FALSE'", "human_name": "Open"},
        ],
    )
    OrderList.join("regions", "JOIN regions ON regions.id = customers.region_id", require_join="customers")
    OrderList.join("customers", "JOIN customers ON customers.id = orders.customer_id")
    OrderList.qualifier("orders.deleted = 0")
    return OrderList(database, settings=settings)


class TestSQLAlchemyDatabase:
    """Test the collaborator on its own."""

    def test_implements_protocol(self, database):
        assert isinstance(database, Database)

    def test_execute_returns_ordered_mappings(self, database):
        rows = database.execute("SELECT number, amount FROM orders WHERE id = 1")
        assert list(rows[0].keys()) == ["number", "amount"]
        assert rows[0]["number"] == "A-001"

    def test_execution_failure_is_wrapped(self, database):
        with patch.object(database, "_fetch", side_effect=ValueError("bad driver state")):
            with pytest.raises(ListError) as exc_info:
                database.execute("SELECT 1")
        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert exc_info.value.details["query"] == "SELECT 1"
        assert not exc_info.value.is_retryable
        assert isinstance(exc_info.value.cause, ValueError)

    @patch("configurable_list.utils.decorators.time.sleep")
    def test_operational_errors_are_retried(self, sleep, database, settings):
        with pytest.raises(ListError) as exc_info:
            database.execute("SELECT * FROM missing_table")
        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert sleep.call_count == settings.database.max_retries
        assert exc_info.value.is_retryable

    @patch("configurable_list.utils.decorators.time.sleep")
    def test_other_errors_are_not_retried(self, sleep, database):
        with patch.object(database, "_fetch", side_effect=ValueError("bad")) as fetch:
            with pytest.raises(ListError):
                database.execute("SELECT 1")
        assert fetch.call_count == 1
        sleep.assert_not_called()

    def test_escape_literal(self, database):
        assert database.escape_literal("it's") == "it''s"
        assert database.escape_literal("10:30") == "10\\:30"
        assert database.escape_literal(42) == "42"

    def test_escaped_colons_round_trip(self, database):
        value = database.escape_literal("a :b")
        assert database.execute(f"SELECT '{value}' AS v")[0]["v"] == "a :b"

    def test_escape_string_literal(self):
        assert escape_string_literal("fil'ter") == "fil''ter"
        assert escape_string_literal("50%") == "50%"
        assert escape_string_literal(None) == ""

    def test_test_connection(self, database):
        assert database.test_connection() is True

    def test_unconfigured_database(self, settings):
        database = SQLAlchemyDatabase(settings=settings)
        assert database.test_connection() is False
        with pytest.raises(ListError) as exc_info:
            database.engine
        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR

    def test_execute_without_url_reports_connection_error(self, settings):
        with pytest.raises(ListError) as exc_info:
            SQLAlchemyDatabase(settings=settings).execute("SELECT 1")
        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR

    def test_engine_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'lists.db'}")
        database = SQLAlchemyDatabase(settings=_reload_settings())
        try:
            assert database.test_connection() is True
        finally:
            database.dispose()
        assert database._engine is None

    def test_list_builds_default_database(self, settings):
        class Bare(ConfigurableList):
            pass

        database = Bare(settings=settings).database
        assert isinstance(database, SQLAlchemyDatabase)
        assert database.settings is settings

    def test_injected_engine_is_not_disposed(self, database, engine):
        database.dispose()
        assert database.engine is engine


class TestListOnSQLite:
    """Evaluate lists end to end against SQLite."""

    def test_paged_sorted_evaluation(self, orders):
        result = orders.evaluate(
            ["number", "customer", "region", "amount", "paid"],
            page=1,
            page_size=2,
            sorts=["number desc"],
        )

        assert result.total_count == 4
        assert result.total_pages == 2
        assert result.has_next
        assert [r.number for r in result] == ["A-005", "A-003"]
        first = result[0]
        assert first.customer == "O'Brien Ltd"
        assert first.region == "South"
        assert first.amount is None
        assert first.paid is True

    def test_second_page(self, orders):
        result = orders.evaluate(["number"], page="2", page_size=2, sorts=["number asc"])
        assert [r.number for r in result] == ["A-003", "A-005"]
        assert result.previous_page == 1
        assert result.next_page is None

    def test_filter_value_with_quote(self, orders):
        result = orders.evaluate(["number", "customer"], filters={"customer": "o'brien"}, sorts=["number"])
        assert [r.number for r in result] == ["A-002", "A-005"]
        assert (result.page, result.page_size, result.total_count) == (1, 2, 2)

    def test_filter_group_is_ored(self, orders):
        result = orders.evaluate(
            ["number", "customer", "region"],
            filters={"customer": "zeta", "region": "north"},
            sorts=["number asc"],
        )
        assert [r.number for r in result] == ["A-001", "A-003"]

    def test_enumerated_filter(self, orders):
        paid = orders.evaluate(["number", "paid"], filters={"paid": "yes"})
        assert sorted(r.number for r in paid) == ["A-001", "A-003", "A-005"]

        ignored = orders.evaluate(["number", "paid"], filters={"paid": "maybe"})
        assert ignored.total_count == 4

    def test_nulls_sort_last(self, orders):
        result = orders.evaluate(["number", "amount"], sorts=["amount asc"])
        assert [r.amount for r in result] == [10.5, 20.0, 30.0, None]

        result = orders.evaluate(["number", "amount"], sorts=["amount desc"])
        assert [r.amount for r in result] == [30.0, 20.0, 10.5, None]

    def test_datetime_values(self, orders):
        result = orders.evaluate(["number", "placed_at"], sorts=["number"])
        assert result[1].placed_at == datetime(2020, 1, 2, 11, 30, 0, 250000)

    def test_no_matches(self, orders):
        result = orders.evaluate(["number", "customer"], page=1, page_size=10, filters={"customer": "nobody"})
        assert len(result) == 0
        assert result.total_count == 0
        assert list(result.to_dataframe().columns) == ["number", "customer"]

    def test_to_dataframe(self, orders):
        frame = orders.evaluate(["number", "amount"], sorts=["number"]).to_dataframe()
        assert frame["number"].tolist() == ["A-001", "A-002", "A-003", "A-005"]

    def test_numeric_filter_template(self, orders):
        result = orders.evaluate(["number", "amount"], filters={"amount": "20"}, sorts=["amount"])
        assert [r.amount for r in result] == [20.0, 30.0]
