import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from opentelemetry.trace import Status, StatusCode

from configurable_list.common.exceptions import ErrorCode, ListError
from configurable_list.definitions import Column, Join, NamedRegistry, OrderedRegistry, Qualifier
from configurable_list.logging import get_logger
from configurable_list.logging.filters import clear_request_context, set_request_context
from configurable_list.protocols import Database
from configurable_list.query_builder import EvaluateOptions, ListQuery, ListQueryBuilder
from configurable_list.results import ResultDecoder, ResultSet
from configurable_list.telemetry import get_tracer

if TYPE_CHECKING:
    from configurable_list.settings import _Settings

logger = get_logger(__name__)


@contextmanager
def evaluation_scope(list_name: str, table_name: str, request_id: Optional[str] = None) -> Iterator[str]:
    """Apply logging context and a tracing span around one evaluation."""
    request_id = request_id or str(uuid.uuid4())
    set_request_context(request_id=request_id, list_name=list_name)

    tracer = get_tracer("configurable_list")
    with tracer.start_as_current_span("configurable_list.list.evaluate") as span:
        span.set_attribute("configurable_list.list.name", list_name)
        span.set_attribute("configurable_list.list.table", table_name)
        span.set_attribute("configurable_list.request_id", request_id)
        try:
            yield request_id
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR))
            raise
        finally:
            clear_request_context()


class ConfigurableList:
    """Declarative list query builder and evaluator.

    Subclasses describe a list view: its base table, the columns it can show,
    the joins those columns need and the qualifiers always applied. Instances
    evaluate the list for a requested column order with filters, sorts and
    paging, and can add columns, joins and qualifiers of their own.

    Join dependencies are declared with ``require_join`` on any column,
    qualifier or join; join ordering is resolved automatically.

    Example:
        >>> class OrderList(ConfigurableList):
        ...     pass
        >>> OrderList.base_table("orders")
        >>> OrderList.column("number", "orders.number", human_name="Number")
        >>> OrderList.column("customer", "customers.name", require_join="customers")
        >>> OrderList.join("customers", "JOIN customers ON customers.id = orders.customer_id")
        >>> OrderList.qualifier("orders.deleted_at IS NULL")
        >>> orders = OrderList(database)
        >>> page = orders.evaluate(["number", "customer"], page=2, page_size=20,
        ...                        filters={"customer": "acme"}, sorts=["number desc"])

    Declarations made on a class are inherited by its subclasses. They are
    expected to be complete before the first instance is created.
    """

    _table_name: ClassVar[Optional[str]] = None
    _columns: ClassVar[Dict[str, Column]] = {}
    _joins: ClassVar[Dict[str, Join]] = {}
    _qualifiers: ClassVar[List[Qualifier]] = []

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls._columns = dict(cls._columns)
        cls._joins = dict(cls._joins)
        cls._qualifiers = list(cls._qualifiers)

    # Class-level declarations

    @classmethod
    def base_table(cls, table: Any) -> None:
        cls._table_name = str(table)

    @classmethod
    def table_name(cls) -> Optional[str]:
        return cls._table_name

    @classmethod
    def column(cls, name: Any, sql_expression: str, **options: Any) -> Column:
        """Declare a column available to every instance of the list.

        Args:
            name: Column alias, used in requests, filters, sorts and records
            sql_expression: SQL producing the value, e.g. ``my_table.attribute``
            **options: ``datatype``, ``require_join``, ``filter``, ``filters``,
                ``disable_filter``, ``filter_group``, ``sort_nulls_last``,
                ``human_name``, ``format`` (see ``Column``)

        Raises:
            ListError: If the definition is invalid
        """
        column = Column(name, sql_expression, **options)
        cls._columns[column.name] = column
        return column

    @classmethod
    def join(cls, name: Any, sql_fragment: str, **options: Any) -> Join:
        """Declare a join, e.g. ``LEFT JOIN table2 ON table2.id = table1.table2_id``."""
        join = Join(name, sql_fragment, **options)
        cls._joins[join.name] = join
        return join

    @classmethod
    def qualifier(cls, sql_condition: str, **options: Any) -> Qualifier:
        """Declare a WHERE condition ANDed into every evaluation."""
        qualifier = Qualifier(sql_condition, **options)
        cls._qualifiers.append(qualifier)
        return qualifier

    def __init__(self, database: Optional[Database] = None, settings: Optional["_Settings"] = None):
        """Initialize a list instance.

        Args:
            database: Database collaborator. Defaults to a
                ``SQLAlchemyDatabase`` built from settings on first use.
            settings: Settings instance, defaults to ``get_settings()``
        """
        if settings is None:
            from configurable_list.settings import get_settings
            settings = get_settings()
        self.settings = settings
        self._database = database

        self._column_registry: NamedRegistry[Column] = NamedRegistry(self._columns)
        self._join_registry: NamedRegistry[Join] = NamedRegistry(self._joins)
        self._qualifier_registry: OrderedRegistry[Qualifier] = OrderedRegistry(self._qualifiers)

    @property
    def database(self) -> Database:
        if self._database is None:
            from configurable_list.database import SQLAlchemyDatabase
            self._database = SQLAlchemyDatabase(settings=self.settings)
        return self._database

    # Instance-level declarations

    def add_column(self, name: Any, sql_expression: str, **options: Any) -> Column:
        """Add a column to this instance only (see ``column``)."""
        column = Column(name, sql_expression, **options)
        self._column_registry.add(column.name, column)
        return column

    def add_join(self, name: Any, sql_fragment: str, **options: Any) -> Join:
        """Add a join to this instance only (see ``join``)."""
        join = Join(name, sql_fragment, **options)
        self._join_registry.add(join.name, join)
        return join

    def add_qualifier(self, sql_condition: str, **options: Any) -> Qualifier:
        """Add a qualifier to this instance only (see ``qualifier``)."""
        qualifier = Qualifier(sql_condition, **options)
        self._qualifier_registry.add(qualifier)
        return qualifier

    # Registry views

    @property
    def all_columns(self) -> Mapping[str, Column]:
        return self._column_registry.merged

    @property
    def all_joins(self) -> Mapping[str, Join]:
        return self._join_registry.merged

    @property
    def all_qualifiers(self) -> Tuple[Qualifier, ...]:
        return self._qualifier_registry.merged

    @property
    def dynamic_columns(self) -> Mapping[str, Column]:
        return self._column_registry.dynamic

    @property
    def display_columns(self) -> Dict[str, Column]:
        """Columns with a display name, in registry order."""
        return {name: column for name, column in self.all_columns.items() if column.display_name is not None}

    def describe_columns(self) -> List[Dict[str, Any]]:
        """Display column configuration for list configuration UIs."""
        return [column.describe() for column in self.display_columns.values()]

    # Evaluation

    def _require_table_name(self) -> str:
        table_name = self.table_name()
        if not table_name:
            raise ListError.from_error_code(
                ErrorCode.MISSING_BASE_TABLE,
                f"{type(self).__name__} has no base table; call base_table() in the list definition",
                details={"list": type(self).__name__},
            )
        return table_name

    def _builder(self) -> ListQueryBuilder:
        return ListQueryBuilder(
            table_name=self._require_table_name(),
            columns=self.all_columns,
            joins=self.all_joins,
            qualifiers=self.all_qualifiers,
            escape=self.database.escape_literal,
        )

    def build_query(self, column_names: Iterable[Any], **options: Any) -> ListQuery:
        """Build the query ``evaluate`` would run, as rendered fragments.

        Raises:
            ListError: On invalid options, a missing base table, an unknown
                join or a join dependency cycle
        """
        return self._builder().build(column_names, EvaluateOptions.build(**options))

    def render(self, column_names: Iterable[Any], **options: Any) -> str:
        """Return the SQL ``evaluate`` would run, without running it."""
        return self.build_query(column_names, **options).to_sql()

    def evaluate(
        self,
        column_names: Iterable[Any],
        *,
        page: Any = 1,
        page_size: Optional[int] = None,
        filters: Optional[Mapping[str, Any]] = None,
        sorts: Optional[Iterable[str]] = None,
        request_id: Optional[str] = None,
    ) -> ResultSet:
        """Retrieve one page of the list.

        Requested columns that are not registered are left out, as are
        filters and sorts on unknown columns.

        Args:
            column_names: Columns to retrieve, in record field order
            page: Page number, starting at 1 (default 1)
            page_size: Rows per page; 0 or None retrieves every row
            filters: Filter values keyed by column name. Free-text columns take
                any text; enumerated columns take one of their option values.
            sorts: ``"<column> <asc|desc>"`` strings, e.g. ``["col_1 asc"]``
            request_id: Correlation id for logs, generated when omitted

        Returns:
            ResultSet with typed records and paging metadata

        Raises:
            ListError: For configuration and option errors, for values that
                cannot be cast, and for errors raised by the database
                collaborator
        """
        column_names = list(column_names)
        options = EvaluateOptions.build(page=page, page_size=page_size, filters=filters, sorts=sorts)
        list_name = type(self).__name__

        with evaluation_scope(list_name, self.table_name() or "", request_id):
            start_time = time.time()
            logger.debug(
                "list.evaluate",
                extra={"list": list_name, "page": options.page, "page_size": options.page_size},
            )
            query = self._builder().build(column_names, options)
            decoder = ResultDecoder(self.all_columns)

            if not query.column_names:
                logger.warning(
                    "list.no_columns",
                    extra={"list": list_name, "requested": [str(name) for name in column_names]},
                )
                return decoder.decode([], page=options.page, page_size=options.page_size or 0)

            sql = query.to_sql()
            if self.settings.query.log_sql:
                limit = self.settings.query.sql_log_max_length
                logger.debug("list.sql", extra={"sql": sql[:limit] + "..." if len(sql) > limit else sql})

            rows = self.database.execute(sql)
            result = decoder.decode(
                rows,
                page=options.page,
                page_size=options.page_size or 0,
                expected_fields=query.column_names,
            )

            logger.info(
                "list.evaluated",
                extra={
                    "list": list_name,
                    "columns": query.column_names,
                    "joins": len(query.joins),
                    "row_count": len(result),
                    "total_count": result.total_count,
                    "duration.seconds": f"{time.time() - start_time:.6f}",
                },
            )
            return result
