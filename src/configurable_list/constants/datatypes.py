"""Column data type constants."""

from enum import Enum


class DataType(str, Enum):
    """Data type of a retrieved list column.

    The data type decides how raw database values are cast when a result
    set is decoded. Values are plain strings so that definitions can be
    declared with either the enum member or its string value.
    """

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
