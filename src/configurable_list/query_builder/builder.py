"""SQL assembly for list evaluation.

The builder turns a requested column list and evaluation options into one
statement. The inner query projects, joins and qualifies; the outer query
adds the window total and applies filters, sorts and paging on the
projected aliases:

    SELECT *, count(*) OVER() AS total_row_count FROM (
      SELECT <expression> AS <alias>,
             ...
      FROM <base table>
      <joins in dependency order>
      WHERE <qualifier>
        AND <qualifier>
    ) AS intermediate_result
    WHERE (<filter>) AND ((<grouped filter> OR <grouped filter>))
    ORDER BY <alias> <direction>[ NULLS LAST], ...
    LIMIT <page size> OFFSET <offset>

Clauses with nothing to render are omitted.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import Field

from configurable_list.constants import INTERMEDIATE_RESULT_ALIAS, TOTAL_ROW_COUNT_COLUMN, SortDirection
from configurable_list.definitions.column import Column
from configurable_list.definitions.join import Join
from configurable_list.definitions.qualifier import Qualifier
from configurable_list.dependencies.resolver import JoinDependencies
from configurable_list.logging import get_logger
from configurable_list.query_builder.options import EvaluateOptions
from configurable_list.types.base import ListBaseModel

logger = get_logger(__name__)

FIELD_SEPARATOR = ",\n         "
JOIN_SEPARATOR = "\n  "
QUALIFIER_SEPARATOR = "\n    AND "


class ListQuery(ListBaseModel):
    """Rendered fragments of one list query.

    Attributes:
        table_name: Base table of the inner query
        column_names: Aliases of the projected columns, in request order
        fields: SELECT fragments
        joins: Join fragments in dependency order
        qualifiers: Inner WHERE conditions
        filters: Outer WHERE conditions, groups already parenthesized
        sorts: ORDER BY fragments
        limit: Page size, or None when unpaged
        offset: Row offset, or None when unpaged
    """

    table_name: str
    column_names: List[str] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    joins: List[str] = Field(default_factory=list)
    qualifiers: List[str] = Field(default_factory=list)
    filters: List[str] = Field(default_factory=list)
    sorts: List[str] = Field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None

    def to_sql(self) -> str:
        lines = [
            f"SELECT *, count(*) OVER() AS {TOTAL_ROW_COUNT_COLUMN} FROM (",
            f"  SELECT {FIELD_SEPARATOR.join(self.fields)}",
            f"  FROM {self.table_name}",
        ]
        if self.joins:
            lines.append(f"  {JOIN_SEPARATOR.join(self.joins)}")
        if self.qualifiers:
            lines.append(f"  WHERE {QUALIFIER_SEPARATOR.join(self.qualifiers)}")
        lines.append(f") AS {INTERMEDIATE_RESULT_ALIAS}")

        if self.filters:
            lines.append(f"WHERE ({') AND ('.join(self.filters)})")
        if self.sorts:
            lines.append(f"ORDER BY {', '.join(self.sorts)}")
        if self.limit is not None:
            lines.append(f"LIMIT {self.limit} OFFSET {self.offset or 0}")
        return "\n".join(lines)


class ListQueryBuilder:
    """Builds list queries from a snapshot of a list's registries.

    Args:
        table_name: Base table of the inner query
        columns: Merged column registry
        joins: Merged join registry
        qualifiers: Merged qualifiers, static first
        escape: Escaping collaborator for free-text filter values
    """

    def __init__(
        self,
        table_name: str,
        columns: Mapping[str, Column],
        joins: Mapping[str, Join],
        qualifiers: Sequence[Qualifier],
        escape: Callable[[Any], str],
    ):
        self.table_name = table_name
        self.columns = columns
        self.joins = joins
        self.qualifiers = qualifiers
        self.escape = escape

    def resolve_columns(self, column_names: Iterable[Any]) -> List[Column]:
        """Look up requested columns; unknown and repeated names are dropped."""
        resolved: List[Column] = []
        for name in dict.fromkeys(str(n) for n in column_names):
            column = self.columns.get(name)
            if column is None:
                logger.debug("Skipping unknown column", extra={"column": name})
                continue
            resolved.append(column)
        return resolved

    def resolve_joins(self, columns: Sequence[Column]) -> List[Join]:
        """Order the joins needed by the columns and by every qualifier."""
        required: List[str] = []
        for column in columns:
            required.extend(column.join_dependencies)
        for qualifier in self.qualifiers:
            required.extend(qualifier.join_dependencies)
        return JoinDependencies(self.joins, required).tsort()

    def filter_fragments(self, filters: Mapping[Any, Any]) -> List[str]:
        """Render outer WHERE conditions.

        Ungrouped conditions come first in filter order, followed by one
        ORed condition per filter group in order of first appearance.
        """
        ungrouped: List[str] = []
        grouped: Dict[str, List[str]] = {}
        for name, value in filters.items():
            column = self.columns.get(str(name))
            if column is None:
                logger.debug("Skipping filter on unknown column", extra={"column": str(name)})
                continue
            fragment = column.render_filter(value, escape=self.escape)
            if fragment is None:
                continue
            if column.filter_group is None:
                ungrouped.append(fragment)
            else:
                grouped.setdefault(column.filter_group, []).append(fragment)

        return ungrouped + [f"({' OR '.join(fragments)})" for fragments in grouped.values()]

    def sort_fragments(self, sorts: Iterable[str], columns: Sequence[Column]) -> List[str]:
        """Render ORDER BY fragments against the projected column aliases."""
        projected = {column.name: column for column in columns}
        fragments: List[str] = []
        for token in sorts:
            parts = str(token).split()
            if not parts:
                continue
            column = projected.get(parts[0])
            if column is None:
                logger.debug("Skipping sort on unprojected column", extra={"sort": token})
                continue
            direction = SortDirection.parse(parts[1] if len(parts) > 1 else "")
            fragments.append(column.render_sort(descending=direction is SortDirection.DESC))
        return fragments

    def build(self, column_names: Iterable[Any], options: EvaluateOptions) -> ListQuery:
        columns = self.resolve_columns(column_names)
        joins = self.resolve_joins(columns)
        return ListQuery(
            table_name=self.table_name,
            column_names=[column.name for column in columns],
            fields=[column.render_select() for column in columns],
            joins=[join.to_sql() for join in joins],
            qualifiers=[qualifier.to_sql() for qualifier in self.qualifiers],
            filters=self.filter_fragments(options.filters),
            sorts=self.sort_fragments(options.sorts, columns),
            limit=options.limit,
            offset=options.offset,
        )
