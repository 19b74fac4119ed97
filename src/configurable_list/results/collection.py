"""Paged result collection."""

import math
from collections.abc import Sequence
from functools import cached_property
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

import pandas as pd

from configurable_list.definitions.column import Column


class ResultSet(Sequence):
    """Typed records of one list evaluation with paging metadata.

    A result set is built once per evaluation and never modified afterwards.
    Records are named tuples whose fields are the returned columns in row
    order.

    Attributes:
        page: Current page, starting at 1
        page_size: Rows per page; equals ``total_count`` for unpaged results
        total_count: Number of rows matching the query across all pages
        fields: Record field names
    """

    def __init__(
        self,
        records: Iterable[NamedTuple],
        page: int,
        page_size: int,
        total_count: int,
        fields: Iterable[str] = (),
        columns: Optional[Mapping[str, Column]] = None,
    ):
        self._records: Tuple[NamedTuple, ...] = tuple(records)
        self.page = page
        self.page_size = page_size
        self.total_count = total_count
        self.fields: Tuple[str, ...] = tuple(fields)
        self._columns = dict(columns or {})

    @classmethod
    def empty(cls, page: int = 1, page_size: int = 0, fields: Iterable[str] = ()) -> "ResultSet":
        return cls((), page=page, page_size=page_size, total_count=0, fields=fields)

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return (
            f"ResultSet(records={len(self)}, page={self.page}, "
            f"page_size={self.page_size}, total_count={self.total_count})"
        )

    @cached_property
    def total_pages(self) -> int:
        if not self.page_size:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def previous_page(self) -> Optional[int]:
        return self.page - 1 if self.has_previous else None

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None

    @property
    def out_of_bounds(self) -> bool:
        return self.page > self.total_pages

    def records_as_dicts(self, formatted: bool = False) -> List[Dict[str, Any]]:
        """Return records as plain dictionaries.

        Args:
            formatted: Apply each column's value formatter
        """
        rows = [record._asdict() for record in self._records]
        if not formatted:
            return rows
        for row in rows:
            for name, value in row.items():
                column = self._columns.get(name)
                if column is not None:
                    row[name] = column.format_value(value)
        return rows

    def to_dict(self, formatted: bool = False) -> Dict[str, Any]:
        """Paging metadata and records, suitable for JSON responses."""
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
            "records": self.records_as_dicts(formatted=formatted),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Records as a DataFrame with one column per record field."""
        return pd.DataFrame.from_records(
            [tuple(record) for record in self._records],
            columns=list(self.fields),
        )
