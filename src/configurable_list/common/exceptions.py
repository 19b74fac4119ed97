from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Standard error codes for list operations.

    Error codes categorize failures without a separate exception class per
    failure. Each category has its own prefix.

    Attributes:
        CONFIG_*: Definition and registration errors
        VALIDATION_*: Evaluation option errors
        PARSE_*: Result decoding errors
        CONNECTION_*: Database connectivity errors
        EXECUTION_*: Query execution errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_002"
    INVALID_FILTER_OPTION = "CONFIG_003"
    UNKNOWN_JOIN = "CONFIG_004"
    DEPENDENCY_CYCLE = "CONFIG_005"
    MISSING_BASE_TABLE = "CONFIG_006"

    # Evaluation option errors
    INVALID_OPTIONS = "VALIDATION_001"

    # Decoding errors
    PARSE_ERROR = "PARSE_001"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"

    # Execution errors
    QUERY_EXECUTION_ERROR = "EXECUTION_001"


class ListError(Exception):
    """Base exception for all configurable list errors.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the failure was transient (a database error of
            the kind the collaborator retries), so the caller may try again later
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # lazy import, logging depends on the package version only
        from configurable_list.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
            exc_info=cause,
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "ListError":
        """Create exception from error code."""
        return cls(message=message, error_code=error_code, **kwargs)


def _truncate(sql: str, limit: int = 500) -> str:
    return sql[:limit] + "..." if len(sql) > limit else sql


def configuration_error(
    message: str,
    definition: Optional[str] = None,
    **kwargs
) -> ListError:
    """Create a configuration error.

    Args:
        message: Error message
        definition: Name of the column/join/qualifier being declared
        **kwargs: Additional error details

    Returns:
        ListError with CONFIG_INVALID code
    """
    details = kwargs.pop('details', {})
    if definition:
        details["definition"] = definition

    return ListError(
        message=message,
        error_code=ErrorCode.CONFIG_INVALID,
        details=details,
        **kwargs
    )


def filter_option_error(
    column: str,
    option: Any,
    **kwargs
) -> ListError:
    """Create an error for a malformed enumerated filter option."""
    details = kwargs.pop('details', {})
    details["column"] = column
    details["option"] = repr(option)

    return ListError(
        message=(
            "Filters should be of the form: { value: str, condition: str | callable, "
            "display_name: str, display_suffix: str }. "
            "display_name and display_suffix are optional."
        ),
        error_code=ErrorCode.INVALID_FILTER_OPTION,
        details=details,
        **kwargs
    )


def unknown_join_error(
    join_name: str,
    required_by: Optional[str] = None,
    **kwargs
) -> ListError:
    """Create an error for a dependency on a join that was never declared."""
    details = kwargs.pop('details', {})
    details["join"] = join_name
    if required_by:
        details["required_by"] = required_by

    suffix = f" (required by '{required_by}')" if required_by else ""
    return ListError(
        message=f"Unknown join '{join_name}'{suffix}",
        error_code=ErrorCode.UNKNOWN_JOIN,
        details=details,
        **kwargs
    )


def dependency_cycle_error(
    cycle: List[str],
    **kwargs
) -> ListError:
    """Create an error for a cycle in the join dependency graph.

    Args:
        cycle: Join names forming the cycle, first name repeated at the end
    """
    details = kwargs.pop('details', {})
    details["cycle"] = list(cycle)

    return ListError(
        message=f"Circular join dependency detected: {' -> '.join(cycle)}",
        error_code=ErrorCode.DEPENDENCY_CYCLE,
        details=details,
        **kwargs
    )


def parse_error(
    message: str,
    value: Any = None,
    column: Optional[str] = None,
    **kwargs
) -> ListError:
    """Create a result decoding error."""
    details = kwargs.pop('details', {})
    if column:
        details["column"] = column
    if value is not None:
        details["value"] = str(value)

    return ListError(
        message=message,
        error_code=ErrorCode.PARSE_ERROR,
        details=details,
        **kwargs
    )


def connection_error(
    message: str,
    service: Optional[str] = None,
    **kwargs
) -> ListError:
    """Create a connection error."""
    details = kwargs.pop('details', {})
    if service:
        details["service"] = service

    return ListError(
        message=message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=details,
        **kwargs
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    max_length: int = 500,
    **kwargs
) -> ListError:
    """Create a query execution error.

    Args:
        query: SQL query that failed
        original_error: The underlying exception
        max_length: Number of query characters kept in the details
        **kwargs: Additional error details

    Returns:
        ListError with QUERY_EXECUTION_ERROR code
    """
    details = kwargs.pop('details', {})
    details["query"] = _truncate(query, max_length)

    return ListError(
        message=f"Query execution failed: {str(original_error)}",
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        cause=original_error,
        **kwargs
    )


def options_error(
    message: str,
    **kwargs
) -> ListError:
    """Create an error for invalid evaluation options (page, page size, sorts)."""
    details = kwargs.pop('details', {})

    return ListError(
        message=message,
        error_code=ErrorCode.INVALID_OPTIONS,
        details=details,
        **kwargs
    )
