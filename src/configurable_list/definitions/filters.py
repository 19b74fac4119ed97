"""Enumerated filter options."""

from typing import Any, Optional

from pydantic import AliasChoices, Field, StrictStr, field_validator

from configurable_list.definitions.specs import Spec, as_spec
from configurable_list.types.base import ListBaseModel


class FilterOption(ListBaseModel):
    """One selectable filter of a column with enumerated filters.

    Attributes:
        value: Canonical filter value supplied at evaluation time
        condition: SQL condition appended to the column name when selected,
            either text or a function of no arguments returning text
        display_name: Optional label shown by configuration UIs
        display_suffix: Optional suffix shown next to the label
    """

    value: StrictStr = Field(..., min_length=1)
    condition: Spec
    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "human_name"),
    )
    display_suffix: Optional[str] = None

    @field_validator("condition", mode="before")
    @classmethod
    def coerce_condition(cls, v: Any) -> Any:
        return as_spec(v)

    @property
    def label(self) -> str:
        """Display name when given, otherwise the raw value."""
        return self.display_name if self.display_name is not None else self.value
