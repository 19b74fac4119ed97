"""Query assembly: evaluation options and SQL rendering."""

from configurable_list.query_builder.builder import ListQuery, ListQueryBuilder
from configurable_list.query_builder.options import EvaluateOptions

__all__ = ["EvaluateOptions", "ListQuery", "ListQueryBuilder"]
