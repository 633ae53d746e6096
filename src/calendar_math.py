"""Month-grid arithmetic: month lengths, weekday offsets, month stepping."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date


def is_leap_year(year: int) -> bool:
    """Gregorian leap year: divisible by 4, except centuries not divisible by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month identified by year and month number (1-12).

    Ordering is lexicographic on ``(year, month)``.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be in 1..12, got {self.month}")

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @classmethod
    def of(cls, d: date) -> YearMonth:
        return cls(d.year, d.month)

    @classmethod
    def parse(cls, value: str) -> YearMonth:
        """Parse ``YYYY-MM``."""
        year, sep, month = value.strip().partition("-")
        if not sep:
            raise ValueError(f"Expected YYYY-MM, got {value!r}")
        return cls(int(year), int(month))

    def at_day(self, day: int) -> date:
        return date(self.year, self.month, day)

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def days_in_month(self) -> int:
        return days_in_month(self)

    def first_weekday_offset(self) -> int:
        return first_weekday_offset(self)

    def plus_months(self, delta: int) -> YearMonth:
        return add_months(self, delta)


MIN_MONTH = YearMonth(MINYEAR, 1)
MAX_MONTH = YearMonth(MAXYEAR, 12)


def is_displayable(ym: YearMonth) -> bool:
    """Whether every day of *ym* is a representable ``date``."""
    return MIN_MONTH <= ym <= MAX_MONTH


def days_in_month(ym: YearMonth) -> int:
    if ym.month == 2:
        return 29 if is_leap_year(ym.year) else 28
    if ym.month in (4, 6, 9, 11):
        return 30
    return 31


def first_weekday_offset(ym: YearMonth) -> int:
    """Weekday of the 1st of *ym*, 0=Sunday .. 6=Saturday.

    This is the number of leading blank cells in a Sunday-first 7-column grid.
    """
    # calendar.weekday counts Monday=0
    return (calendar.weekday(ym.year, ym.month, 1) + 1) % 7


def add_months(ym: YearMonth, delta: int) -> YearMonth:
    """Shift *ym* by a signed number of months, carrying into the year."""
    index = ym.year * 12 + (ym.month - 1) + delta
    year, month0 = divmod(index, 12)
    return YearMonth(year, month0 + 1)


def compare(a: YearMonth, b: YearMonth) -> int:
    """Return -1, 0 or 1 as *a* is before, equal to, or after *b*."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def month_cells(ym: YearMonth) -> list[date | None]:
    """Lay out *ym* for a Sunday-first 7-column grid.

    Leading ``None`` entries pad the first week; the rest are the month's
    days in order. Trailing cells are not padded.
    """
    cells: list[date | None] = [None] * first_weekday_offset(ym)
    cells.extend(ym.at_day(day) for day in range(1, days_in_month(ym) + 1))
    return cells


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5  # Monday=0, Saturday=5, Sunday=6
