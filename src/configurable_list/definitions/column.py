"""Column definitions.

A column is one retrievable, sortable and filterable attribute of a list.
It knows how to render itself into the generated SQL and how to cast the
raw database value it produces back into a Python value.
"""

import keyword
import numbers
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from pydantic import AliasChoices, Field, ValidationError, ValidationInfo, field_validator

from configurable_list.common.exceptions import (
    configuration_error,
    filter_option_error,
    parse_error,
)
from configurable_list.constants import DEFAULT_FILTER_TEMPLATE, TAUTOLOGY, DataType, SortDirection
from configurable_list.constants.sql import BOOLEAN_TRUE
from configurable_list.definitions.filters import FilterOption
from configurable_list.definitions.specs import Spec, Template, as_spec, render_spec
from configurable_list.types.base import ListBaseModel
from configurable_list.utils.datetime import parse_db_datetime
from configurable_list.utils.sql import interpolate_sql_template, is_blank

_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Unparseable integer text matching one of these casts to 1, anything else to 0
_TRUTHY_TOKENS = frozenset({"true", "t", "yes", "y", "on"})


def normalize_join_names(value: Any) -> List[str]:
    """Accept a single join name or a collection of names; drop duplicates."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    names: List[str] = []
    for name in value:
        name = str(name)
        if name not in names:
            names.append(name)
    return names


def validate_identifier(value: str, kind: str) -> str:
    if not _IDENTIFIER.match(value) or keyword.iskeyword(value):
        raise ValueError(
            f"Invalid {kind} name '{value}'. Must start with a letter, "
            f"contain only alphanumeric characters or underscores, and not be a Python keyword."
        )
    return value


class Column(ListBaseModel):
    """A named, typed projection of a list query.

    Columns are usually declared through ``ConfigurableList.column`` or
    ``ConfigurableList.add_column``, which forward their keyword options here.

    Attributes:
        name: Output alias of the column, unique within a list.
        sql_expression: SQL producing the value. Qualify attributes with their
            table name to avoid ambiguity (``my_table.attribute``).
        datatype: Type used to cast retrieved values (default string).
        join_dependencies: Joins required by ``sql_expression``
            (option ``require_join``; a single name or a list).
        filter_template: Free-text filter, a printf-style template or a
            function of the filter value returning one (option ``filter``,
            default ``ILIKE '%%%s%%'``). The value is escaped before it is
            substituted.
        filter_options: Enumerated filters (option ``filters``); when set the
            free-text template is not used.
        disable_filter: Ignore filters on this column.
        filter_group: Filters of columns sharing a group are ORed together
            before being ANDed with the other filters.
        sort_nulls_last: Always sort nulls to the end (default True).
        display_name: Human name (option ``human_name``). Columns without one
            are internal and excluded from ``display_columns``.
        value_formatter: printf-style template or function turning a value
            into its presentation (option ``format``).
    """

    name: str
    sql_expression: str
    datatype: DataType = DataType.STRING
    join_dependencies: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("join_dependencies", "require_join"),
    )
    filter_template: Spec = Field(
        default_factory=lambda: Template(DEFAULT_FILTER_TEMPLATE),
        validation_alias=AliasChoices("filter_template", "filter"),
    )
    filter_options: Optional[List[FilterOption]] = Field(
        default=None,
        validation_alias=AliasChoices("filter_options", "filters"),
    )
    disable_filter: bool = False
    filter_group: Optional[str] = None
    sort_nulls_last: bool = True
    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "human_name"),
    )
    value_formatter: Optional[Spec] = Field(
        default=None,
        validation_alias=AliasChoices("value_formatter", "format"),
    )

    def __init__(self, name: str, sql_expression: str, **options: Any):
        try:
            super().__init__(name=str(name), sql_expression=sql_expression, **options)
        except ValidationError as exc:
            raise configuration_error(
                f"Invalid column definition '{name}': {exc.errors()[0]['msg']}",
                definition=str(name),
                details={"errors": [str(err["loc"]) for err in exc.errors()]},
                cause=exc,
            ) from exc

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_identifier(v, "column")

    @field_validator("join_dependencies", mode="before")
    @classmethod
    def coerce_join_dependencies(cls, v: Any) -> List[str]:
        return normalize_join_names(v)

    @field_validator("filter_template", "value_formatter", mode="before")
    @classmethod
    def coerce_spec(cls, v: Any) -> Any:
        return as_spec(v)

    @field_validator("filter_group", mode="before")
    @classmethod
    def coerce_filter_group(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("filter_options", mode="before")
    @classmethod
    def validate_filter_options(cls, v: Any, info: ValidationInfo) -> Optional[List[FilterOption]]:
        """Build enumerated filter options, failing on malformed ones."""
        if v is None:
            return None
        column = info.data.get("name", "?")
        options: List[FilterOption] = []
        for option in v:
            if isinstance(option, FilterOption):
                options.append(option)
                continue
            if not isinstance(option, dict):
                raise filter_option_error(column, option)
            try:
                options.append(FilterOption(**option))
            except ValidationError as exc:
                raise filter_option_error(column, option, cause=exc) from exc
        return options

    # SQL rendering

    def render_select(self) -> str:
        return f"{self.sql_expression} AS {self.name}"

    def render_sort(self, descending: bool = False) -> str:
        """Render an ORDER BY fragment on the output alias."""
        direction = SortDirection.DESC if descending else SortDirection.ASC
        nulls = " NULLS LAST" if self.sort_nulls_last else ""
        return f"{self.name} {direction.value}{nulls}"

    def render_filter(self, value: Any = None, escape: Optional[Callable[[Any], str]] = None) -> Optional[str]:
        """Render a WHERE fragment for a filter value.

        Args:
            value: Filter value supplied at evaluation time (untrusted)
            escape: Escaping collaborator. Defaults to SQL standard quote
                doubling via SQLAlchemy.

        Returns:
            The condition, ``1=1`` for an unknown enumerated value, or None
            when filtering is disabled
        """
        if self.disable_filter:
            return None

        if self.filter_options is None:
            if escape is None:
                from configurable_list.database.escaping import escape_string_literal
                escape = escape_string_literal
            template = render_spec(self.filter_template, value)
            return interpolate_sql_template(f"{self.name} {template}", value, escape)

        option = self.filter_option_for(value)
        if option is None:
            return TAUTOLOGY
        return f"{self.name} {render_spec(option.condition)}"

    # Filter option lookups

    def filter_option_for(self, value: Any) -> Optional[FilterOption]:
        for option in self.filter_options or []:
            if option.value == value:
                return option
        return None

    def resolve_filter_value(self, label: str) -> Optional[str]:
        """Return the filter value whose display name (or raw value) is ``label``."""
        for option in self.filter_options or []:
            if option.label == label:
                return option.value
        return None

    # Value handling

    def cast_value(self, raw: Any) -> Any:
        """Cast a raw database value according to the column data type."""
        if raw is None:
            return None

        datatype = DataType(self.datatype)
        if datatype is DataType.STRING:
            return raw
        if datatype is DataType.INTEGER:
            return self._cast_integer(raw)
        if datatype is DataType.FLOAT:
            return self._cast_float(raw)
        if datatype is DataType.DATETIME:
            return self._cast_datetime(raw)
        if datatype is DataType.BOOLEAN:
            if isinstance(raw, bool):
                return raw
            return raw == BOOLEAN_TRUE
        return raw

    def _cast_integer(self, raw: Any) -> int:
        """Cast to int, truncating fractional values.

        Text that is not numeric at all falls back to 1 for a truthy token and
        0 otherwise.
        """
        if isinstance(raw, numbers.Number):
            try:
                return int(raw)
            except (TypeError, ValueError, OverflowError):
                return 0
        text = str(raw).strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return int(Decimal(text))
        except (InvalidOperation, ValueError, OverflowError):
            return 1 if text.lower() in _TRUTHY_TOKENS else 0

    def _cast_float(self, raw: Any) -> float:
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise parse_error(
                f"Couldn't parse float value ({raw})",
                value=raw,
                column=self.name,
                cause=exc,
            ) from exc

    def _cast_datetime(self, raw: Any) -> datetime:
        if isinstance(raw, datetime):
            return raw
        if isinstance(raw, date):
            return datetime(raw.year, raw.month, raw.day)
        parsed = parse_db_datetime(str(raw))
        if parsed is None:
            raise parse_error(
                f"Couldn't parse datetime value ({raw})",
                value=raw,
                column=self.name,
            )
        return parsed

    def format_value(self, value: Any) -> Any:
        """Turn a cast value into its presentation."""
        if self.value_formatter is None:
            return value
        if isinstance(self.value_formatter, Template):
            if is_blank(value):
                return value
            return self.value_formatter.text % (value,)
        return render_spec(self.value_formatter, value)

    @property
    def filterable(self) -> bool:
        return not self.disable_filter

    def describe(self) -> Dict[str, Any]:
        """Configuration summary for list configuration UIs."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "datatype": DataType(self.datatype).value,
            "filterable": self.filterable,
            "filter_group": self.filter_group,
            "filter_options": [
                {"value": o.value, "label": o.label, "display_suffix": o.display_suffix}
                for o in self.filter_options or []
            ],
        }
