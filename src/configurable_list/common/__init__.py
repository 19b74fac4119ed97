"""Common exceptions for configurable_list.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions are ``ListError``
    instances carrying structured details.

    - Configuration errors are raised while definitions are declared or
      while join dependencies are resolved.
    - Parse errors are raised while raw rows are decoded.
    - Connection and execution errors are raised by the database collaborator
      and reach the caller of ``List.evaluate`` unchanged.
"""

from configurable_list.common.exceptions import (
    ErrorCode,
    ListError,
    # Helper functions
    configuration_error,
    connection_error,
    dependency_cycle_error,
    filter_option_error,
    options_error,
    parse_error,
    query_execution_error,
    unknown_join_error,
)

__all__ = [
    # Base Exception and Error Codes
    "ListError",
    "ErrorCode",
    # Helper functions
    "configuration_error",
    "connection_error",
    "dependency_cycle_error",
    "filter_option_error",
    "options_error",
    "parse_error",
    "query_execution_error",
    "unknown_join_error",
]
