"""Reminder timing: when a memo's notification should fire relative to now."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from memo import Memo

_ONE_MILLISECOND = timedelta(milliseconds=1)


@dataclass(frozen=True)
class ReminderTask:
    """A one-shot notification: show *content* at *fire_at* (local wall clock)."""

    content: str
    fire_at: datetime

    def delay_millis(self, now: datetime) -> int:
        return delay_millis(self.fire_at, now)


def delay_millis(fire_at: datetime, now: datetime) -> int:
    """Whole milliseconds from *now* until *fire_at* (negative if past).

    An aware *now* is converted to local wall-clock time first.
    """
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return (fire_at - now) // _ONE_MILLISECOND


def combine(memo: Memo) -> datetime | None:
    """The memo's reminder instant, or ``None`` when it has no time."""
    if memo.time is None:
        return None
    return datetime.combine(memo.date, memo.time)


def schedule(memo: Memo, now: datetime) -> ReminderTask | None:
    """Work out the reminder for *memo*.

    Returns ``None`` when the memo has no time, or when the reminder instant
    is now or already past. Stale reminders are dropped, never fired late.
    """
    fire_at = combine(memo)
    if fire_at is None:
        return None
    if delay_millis(fire_at, now) <= 0:
        return None
    return ReminderTask(content=memo.content, fire_at=fire_at)
