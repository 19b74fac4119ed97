"""Runtime evaluation options."""

from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError, field_validator

from configurable_list.common.exceptions import options_error
from configurable_list.types.base import ListBaseModel


class EvaluateOptions(ListBaseModel):
    """Paging, filters and sorts supplied for one evaluation.

    Attributes:
        page: 1-based page number; None or absent means 1. Numeric strings
            are accepted.
        page_size: Rows per page; 0 or None returns every row in one page.
        filters: Filter values keyed by column name.
        sorts: ``"<column> <asc|desc>"`` tokens, applied in order.
    """

    page: int = Field(default=1, ge=1)
    page_size: Optional[int] = Field(default=None, ge=0)
    filters: Dict[str, Any] = Field(default_factory=dict)
    sorts: List[str] = Field(default_factory=list)

    @classmethod
    def build(cls, **options: Any) -> "EvaluateOptions":
        """Validate keyword options, raising ``ListError`` on bad input."""
        try:
            return cls(**options)
        except ValidationError as exc:
            raise options_error(
                f"Invalid evaluation options: {exc.errors()[0]['msg']}",
                details={"fields": [".".join(str(p) for p in err["loc"]) for err in exc.errors()]},
                cause=exc,
            ) from exc

    @field_validator("page", mode="before")
    @classmethod
    def default_page(cls, v: Any) -> Any:
        if v is None:
            return 1
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("filters", mode="before")
    @classmethod
    def default_filters(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("sorts", mode="before")
    @classmethod
    def default_sorts(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @property
    def paged(self) -> bool:
        return bool(self.page_size)

    @property
    def limit(self) -> Optional[int]:
        return self.page_size if self.paged else None

    @property
    def offset(self) -> Optional[int]:
        return (self.page - 1) * self.page_size if self.paged else None
