"""Database collaborators for list evaluation."""

from configurable_list.database.engine import SQLAlchemyDatabase
from configurable_list.database.escaping import escape_string_literal

__all__ = ["SQLAlchemyDatabase", "escape_string_literal"]
