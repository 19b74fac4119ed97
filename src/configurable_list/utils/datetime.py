"""DateTime parsing for database text values."""

import re
from datetime import datetime
from typing import Optional

# YYYY-MM-DD HH:MM:SS with optional fractional seconds
DB_DATETIME_PATTERN = re.compile(
    r"\A(\d{4})-(\d\d)-(\d\d) (\d\d):(\d\d):(\d\d)(?:\.(\d+))?\Z"
)


def parse_db_datetime(value: str) -> Optional[datetime]:
    """Parse a database timestamp into a naive datetime.

    Fractional seconds are right-padded or truncated to microseconds. No
    time zone is applied.

    Args:
        value: Text in the form ``YYYY-MM-DD HH:MM:SS[.ffffff]``

    Returns:
        The parsed datetime, or None when the text does not match the pattern
    """
    match = DB_DATETIME_PATTERN.match(value)
    if match is None:
        return None

    year, month, day, hour, minute, second, fraction = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond,
    )
