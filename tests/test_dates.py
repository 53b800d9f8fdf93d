"""Tests for day and month parsing."""

from datetime import date

import pytest

from jotter.dates import iter_days, month_bounds, parse_date, parse_month
from jotter.errors import InvalidDateFormatError, InvalidMonthFormatError
from jotter.legacy import parse_line


def test_parse_date() -> None:
    assert parse_date("2025-10-14") == date(2025, 10, 14)
    assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)


@pytest.mark.parametrize("value", ["2025-1-14", "2025-02-30", "20251014", "", "2025-10-14 "])
def test_parse_date_rejects(value: str) -> None:
    with pytest.raises(InvalidDateFormatError):
        parse_date(value)


@pytest.mark.parametrize("value", ["2025-2", "2025-00", "25-02", "2025-02-01"])
def test_parse_month_rejects(value: str) -> None:
    with pytest.raises(InvalidMonthFormatError):
        parse_month(value)


@pytest.mark.parametrize(
    "month, last",
    [("2025-02", 28), ("2024-02", 29), ("2025-04", 30), ("2025-12", 31)],
)
def test_month_bounds(month: str, last: int) -> None:
    first, end = month_bounds(month)
    assert first.day == 1
    assert end.day == last
    assert len(list(iter_days(first, end))) == last


def test_iter_days_empty_when_reversed() -> None:
    assert list(iter_days(date(2025, 1, 2), date(2025, 1, 1))) == []


class TestLegacyLine:
    def test_well_formed(self) -> None:
        note = parse_line("[07:05:09] wake up\n", "2025-10-14")
        assert note.content == "wake up"
        assert note.id == "2025-10-14-07:05:09"

    @pytest.mark.parametrize("line", ["", "no brackets", "[7:05:09] short hour", "[07:05:09] ", "[07:05:09]x"])
    def test_skipped(self, line: str) -> None:
        assert parse_line(line, "2025-10-14") is None
