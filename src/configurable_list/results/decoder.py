"""Decoding of raw rows into typed, paged results."""

from collections import namedtuple
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from configurable_list.constants import TOTAL_ROW_COUNT_COLUMN
from configurable_list.definitions.column import Column
from configurable_list.logging import get_logger
from configurable_list.results.collection import ResultSet

logger = get_logger(__name__)


class ResultDecoder:
    """Turns database rows into a ``ResultSet``.

    Args:
        columns: Merged column registry used to cast values
    """

    def __init__(self, columns: Mapping[str, Column]):
        self.columns = columns

    def total_count(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """Read the window total from the first row."""
        if not rows:
            return 0
        total = rows[0].get(TOTAL_ROW_COUNT_COLUMN)
        if total is None:
            return len(rows)
        return int(total)

    def record_fields(self, row: Mapping[str, Any], strip_columns: Iterable[str] = ()) -> List[str]:
        """Registered columns of a row in row order, without stripped ones."""
        stripped = {TOTAL_ROW_COUNT_COLUMN, *strip_columns}
        fields = []
        for key in row.keys():
            name = str(key)
            if name in stripped:
                continue
            if name not in self.columns:
                logger.debug("Dropping unregistered result column", extra={"column": name})
                continue
            fields.append(name)
        return fields

    def decode(
        self,
        rows: Sequence[Mapping[str, Any]],
        page: int,
        page_size: int,
        total_count: Optional[int] = None,
        strip_columns: Iterable[str] = (),
        expected_fields: Iterable[str] = (),
    ) -> ResultSet:
        """Cast rows and attach paging metadata.

        Args:
            rows: Raw rows returned by the database collaborator
            page: Requested page
            page_size: Requested page size; 0 marks an unpaged request
            total_count: Total row count; read from the rows when omitted
            strip_columns: Extra columns to leave out of the records
            expected_fields: Fields reported by an empty result set

        Raises:
            ListError: PARSE_ERROR when a value cannot be cast
        """
        if total_count is None:
            total_count = self.total_count(rows)
        if not page_size:
            page, page_size = 1, total_count

        if not rows:
            return ResultSet.empty(page=page, page_size=page_size, fields=expected_fields)

        fields = self.record_fields(rows[0], strip_columns)
        record_type = namedtuple("Record", fields)
        records = [
            record_type(*(self.columns[name].cast_value(row.get(name)) for name in fields))
            for row in rows
        ]
        return ResultSet(
            records,
            page=page,
            page_size=page_size,
            total_count=total_count,
            fields=fields,
            columns={name: self.columns[name] for name in fields},
        )
