"""
Date helpers for bucket keys (YYYY-MM-DD) and month queries (YYYY-MM).
"""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterator

from jotter.errors import InvalidDateFormatError, InvalidMonthFormatError

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string. Raises InvalidDateFormatError."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise InvalidDateFormatError(str(value))
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateFormatError(value) from None


def parse_month(value: str) -> tuple[int, int]:
    """Parse a YYYY-MM string into (year, month). Raises InvalidMonthFormatError."""
    if not isinstance(value, str) or not MONTH_RE.match(value):
        raise InvalidMonthFormatError(str(value))
    try:
        parsed = datetime.strptime(value, MONTH_FORMAT)
    except ValueError:
        raise InvalidMonthFormatError(value) from None
    return parsed.year, parsed.month


def month_bounds(value: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, month = parse_month(value)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each day from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)
