import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from configurable_list.settings import _Settings

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import QueuePool

from configurable_list.common.exceptions import ListError, connection_error, query_execution_error
from configurable_list.database.escaping import escape_string_literal
from configurable_list.logging import get_logger
from configurable_list.utils.decorators import retry_with_backoff, traced

logger = get_logger(__name__)


class SQLAlchemyDatabase:
    """SQLAlchemy-backed database collaborator for lists.

    Runs list queries on a pooled connection and escapes filter values.
    Transient failures (``OperationalError``) are retried with exponential
    backoff according to ``DatabaseSettings``; any other failure, or the last
    transient one, is raised as a ``ListError`` with the
    ``QUERY_EXECUTION_ERROR`` code.

    Statements are executed through ``text()``, so a colon followed by a
    word in static list configuration must be written as ``\\:``.

    Example:
        >>> database = SQLAlchemyDatabase(engine=create_engine("sqlite://"))
        >>> rows = database.execute("SELECT 1 AS one")
        >>> rows[0]["one"]
        1
    """

    def __init__(self, engine: Optional[Engine] = None, settings: Optional["_Settings"] = None):
        """Initialize the collaborator.

        Args:
            engine: Existing engine to use. When omitted an engine is created
                lazily from ``settings.database``.
            settings: Settings instance, defaults to ``get_settings()``
        """
        if settings is None:
            from configurable_list.settings import get_settings
            settings = get_settings()
        self.settings = settings
        self._engine: Optional[Engine] = engine
        self._owns_engine = engine is None

    @property
    def engine(self) -> Engine:
        """Get or create the SQLAlchemy engine with lazy initialization."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create an engine with connection pooling from ``DatabaseSettings``.

        Raises:
            ListError: CONNECTION_ERROR if no URL is configured or engine
                creation fails
        """
        db_settings = self.settings.database
        if not db_settings.is_configured:
            raise connection_error(
                "No database URL configured (set DATABASE_URL)",
                service="database",
            )

        try:
            engine = create_engine(
                db_settings.url.get_secret_value(),
                poolclass=QueuePool,
                pool_pre_ping=db_settings.pool_pre_ping,
                pool_size=db_settings.pool_size,
                max_overflow=db_settings.max_overflow,
                pool_timeout=db_settings.pool_timeout,
                echo=db_settings.echo,
            )
        except Exception as e:
            raise connection_error(
                "Failed to create database engine",
                service="database",
                cause=e
            ) from e

        logger.info("Created database engine", extra={"db.system": engine.dialect.name})
        return engine

    @contextmanager
    def _get_connection(self):
        """Get a database connection from the pool.

        Yields:
            Connection: Pooled connection, closed on exit
        """
        conn: Connection = self.engine.connect()
        try:
            yield conn
        finally:
            conn.close()

    def _span_attributes(self, sql: str) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for a list query."""
        statement = (sql or "").strip()
        if len(statement) > 4096:
            statement = f"{statement[:4093]}..."
        attributes: Dict[str, Any] = {
            "db.operation": "select",
            "db.statement.length": len(statement),
        }
        if statement:
            attributes["db.statement"] = statement
        if self._engine is not None:
            attributes["db.system"] = self._engine.dialect.name
        return attributes

    def _fetch(self, sql: str) -> List[Mapping[str, Any]]:
        with self._get_connection() as conn:
            return list(conn.execute(text(sql)).mappings().all())

    @traced(
        span_name="configurable_list.database.execute",
        attribute_getter=lambda self, sql: self._span_attributes(sql),
    )
    def execute(self, sql: str) -> List[Mapping[str, Any]]:
        """Run a list query and return its rows as ordered mappings.

        Raises:
            ListError: QUERY_EXECUTION_ERROR if the query fails
        """
        db_settings = self.settings.database
        fetch = retry_with_backoff(
            max_retries=db_settings.max_retries,
            initial_delay=db_settings.retry_delay_seconds,
            retry_on=(OperationalError,),
        )(self._fetch)

        start_time = time.time()
        try:
            rows = fetch(sql)
        except ListError:
            raise
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "List query failed",
                extra={"duration.seconds": f"{duration:.6f}", "error": str(exc)},
                exc_info=True,
            )
            raise query_execution_error(
                sql,
                exc,
                max_length=self.settings.query.sql_log_max_length,
                is_retryable=isinstance(exc, OperationalError),
            ) from exc

        duration = time.time() - start_time
        logger.info(
            "List query executed",
            extra={"duration.seconds": f"{duration:.6f}", "row_count": str(len(rows))},
        )
        return rows

    def escape_literal(self, value: Any) -> str:
        """Escape a filter value for a single-quoted literal in a ``text()`` statement."""
        return escape_string_literal(value).replace(":", "\\:")

    def test_connection(self) -> bool:
        """Test if the database is reachable.

        Returns:
            True if ``SELECT 1`` succeeds, False otherwise
        """
        try:
            with self._get_connection() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as exc:
            logger.error(
                "Database connection test failed",
                extra={"error": str(exc)},
                exc_info=True,
            )
            return False

    def dispose(self) -> None:
        """Close pooled connections of an engine this collaborator created."""
        if self._engine is not None and self._owns_engine:
            self._engine.dispose()
            self._engine = None
