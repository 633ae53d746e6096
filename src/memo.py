"""Core data structure for calendar memos."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, time

PREVIEW_LENGTH = 5


@dataclass(frozen=True)
class Memo:
    """A note attached to a calendar date.

    *time* is an optional local wall-clock time (no timezone). When set, the
    memo asks for a reminder at ``date`` + ``time``. Two memos are equal
    when date, time and content all match.
    """

    date: date
    time: time | None
    content: str

    def preview(self, limit: int = PREVIEW_LENGTH) -> str:
        """Short text for a grid cell: the first *limit* characters plus ``...``."""
        if len(self.content) > limit:
            return self.content[:limit] + "..."
        return self.content

    def to_dict(self) -> dict:
        """Serialize to a plain JSON-friendly dict."""
        return {
            "date": self.date.isoformat(),
            "time": format_time(self.time) if self.time is not None else None,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Memo:
        raw_time = data.get("time")
        return cls(
            date=parse_date(data["date"]),
            time=parse_time(raw_time) if raw_time is not None else None,
            content=data.get("content", ""),
        )


def format_time(t: time) -> str:
    """``HH:MM``, or ``HH:MM:SS`` when seconds are set."""
    if t.second:
        return t.strftime("%H:%M:%S")
    return t.strftime("%H:%M")


_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"\d{2}:\d{2}(:\d{2})?")


def parse_date(value: str | date) -> date:
    """Parse ``YYYY-MM-DD`` or pass through if already a date."""
    if isinstance(value, date):
        return value
    if not _DATE_RE.fullmatch(value):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def parse_time(value: str | time) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` as a local time.

    Offsets and fractional seconds are refused, also on ``time`` objects.
    """
    if isinstance(value, time):
        if value.tzinfo is not None:
            raise ValueError("Memo time must not carry a timezone")
        if value.microsecond:
            raise ValueError("Memo time must not carry fractional seconds")
        return value
    if not _TIME_RE.fullmatch(value):
        raise ValueError(f"Expected HH:MM or HH:MM:SS, got {value!r}")
    return time.fromisoformat(value)
