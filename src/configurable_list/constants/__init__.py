"""Constants module for configurable_list.

This module contains constant values and enumerations used throughout
the package. It has no dependencies on other configurable_list modules.

Organization:
    - datatypes: Column data types used for result type casting
    - sql: SQL rendering constants shared by the query builder and decoder
"""

from configurable_list.constants.datatypes import DataType
from configurable_list.constants.sql import (
    DEFAULT_FILTER_TEMPLATE,
    INTERMEDIATE_RESULT_ALIAS,
    TAUTOLOGY,
    TOTAL_ROW_COUNT_COLUMN,
    SortDirection,
)

__all__ = [
    "DataType",
    "SortDirection",
    "DEFAULT_FILTER_TEMPLATE",
    "INTERMEDIATE_RESULT_ALIAS",
    "TAUTOLOGY",
    "TOTAL_ROW_COUNT_COLUMN",
]
