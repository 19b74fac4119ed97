"""SQL rendering constants.

These values define the shape of every generated list query. Changing any
of them changes the generated SQL text.
"""

from enum import Enum


# Synthetic window-function column carrying the unpaged row count
TOTAL_ROW_COUNT_COLUMN = "total_row_count"

# Alias of the wrapped inner query
INTERMEDIATE_RESULT_ALIAS = "intermediate_result"

# Free-text filter applied to columns that declare no filter of their own
DEFAULT_FILTER_TEMPLATE = "ILIKE '%%%s%%'"

# Rendered for an enumerated filter value that matches no declared option
TAUTOLOGY = "1=1"

# Literal marking a true boolean column value
BOOLEAN_TRUE = "TRUE"


class SortDirection(str, Enum):
    """Sort direction keywords."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, token: str) -> "SortDirection":
        """Parse a direction token; anything but ``desc`` sorts ascending."""
        if token and token.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC
