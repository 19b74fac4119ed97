"""Database collaborator protocol.

A list never talks to a driver directly. It renders one SQL string per
evaluation and hands it to an object implementing this protocol, which is
also responsible for escaping untrusted filter values.
"""

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Database(Protocol):
    """Interface a list uses to run its query.

    Implementations own connection handling, timeouts and retries. Errors
    raised by ``execute`` reach the caller of ``List.evaluate`` unchanged.
    """

    def execute(self, sql: str) -> Sequence[Mapping[str, Any]]:
        """Run a SQL statement and return its rows.

        Args:
            sql: Complete SQL text

        Returns:
            Rows as mappings from column name to raw value, preserving the
            column order of the SELECT list
        """
        ...

    def escape_literal(self, value: Any) -> str:
        """Escape a value for embedding inside a quoted SQL string literal.

        Args:
            value: Untrusted value

        Returns:
            Escaped literal body, without surrounding quotes
        """
        ...
