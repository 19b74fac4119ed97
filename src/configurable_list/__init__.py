
from configurable_list.__version__ import __version__
from configurable_list.lists import ConfigurableList

from configurable_list.definitions import Column, Computed, FilterOption, Join, Qualifier, Template
from configurable_list.constants import DataType
from configurable_list.results import ResultSet
from configurable_list.database import SQLAlchemyDatabase
from configurable_list.protocols import Database

from configurable_list.common.exceptions import ListError, ErrorCode

from configurable_list.logging import setup_logging


__all__ = [
    "__version__",

    "ConfigurableList",

    "Column",
    "Join",
    "Qualifier",
    "FilterOption",
    "Template",
    "Computed",
    "DataType",

    "ResultSet",

    "Database",
    "SQLAlchemyDatabase",

    # Exceptions (public API)
    "ListError",
    "ErrorCode",

    "setup_logging",
]
