"""Join definitions."""

from typing import Any, List

from pydantic import AliasChoices, Field, ValidationError, field_validator

from configurable_list.common.exceptions import configuration_error
from configurable_list.definitions.column import normalize_join_names, validate_identifier
from configurable_list.types.base import ListBaseModel


class Join(ListBaseModel):
    """A named SQL join fragment.

    Attributes:
        name: Name used by ``require_join`` declarations.
        sql_fragment: Full text of the join,
            e.g. ``LEFT JOIN table2 ON table2.id = table1.table2_id``.
        join_dependencies: Joins that must appear earlier in the FROM clause.
    """

    name: str
    sql_fragment: str
    join_dependencies: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("join_dependencies", "require_join"),
    )

    def __init__(self, name: str, sql_fragment: str, **options: Any):
        try:
            super().__init__(name=str(name), sql_fragment=sql_fragment, **options)
        except ValidationError as exc:
            raise configuration_error(
                f"Invalid join definition '{name}': {exc.errors()[0]['msg']}",
                definition=str(name),
                cause=exc,
            ) from exc

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_identifier(v, "join")

    @field_validator("join_dependencies", mode="before")
    @classmethod
    def coerce_join_dependencies(cls, v: Any) -> List[str]:
        return normalize_join_names(v)

    def to_sql(self) -> str:
        return self.sql_fragment
