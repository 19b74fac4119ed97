"""String literal escaping for filter values."""

from typing import Any

from sqlalchemy import String
from sqlalchemy.engine import default

# The default dialect uses named parameters, so percent signs are left alone
_quote = String().literal_processor(dialect=default.DefaultDialect())


def escape_string_literal(value: Any) -> str:
    """Escape a value for embedding inside a single-quoted SQL literal.

    Quotes are doubled the way the SQL standard requires. The surrounding
    quotes are not included: ``fil'ter`` becomes ``fil''ter``.
    """
    return _quote("" if value is None else str(value))[1:-1]
