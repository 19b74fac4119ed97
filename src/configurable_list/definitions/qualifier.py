"""Qualifier definitions."""

from typing import Any, List

from pydantic import AliasChoices, Field, ValidationError, field_validator

from configurable_list.common.exceptions import configuration_error
from configurable_list.definitions.column import normalize_join_names
from configurable_list.types.base import ListBaseModel


class Qualifier(ListBaseModel):
    """A WHERE condition applied to every evaluation of a list.

    All qualifiers of a list are joined with ``AND`` in the inner query.
    """

    sql_condition: str
    join_dependencies: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("join_dependencies", "require_join"),
    )

    def __init__(self, sql_condition: str, **options: Any):
        try:
            super().__init__(sql_condition=sql_condition, **options)
        except ValidationError as exc:
            raise configuration_error(
                f"Invalid qualifier '{sql_condition}': {exc.errors()[0]['msg']}",
                definition=str(sql_condition),
                cause=exc,
            ) from exc

    @field_validator("join_dependencies", mode="before")
    @classmethod
    def coerce_join_dependencies(cls, v: Any) -> List[str]:
        return normalize_join_names(v)

    def to_sql(self) -> str:
        return self.sql_condition
