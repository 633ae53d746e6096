"""Calendar app service: memos, navigation and reminders behind one object."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from dataclasses import dataclass
from datetime import date, datetime, time

from dotenv import load_dotenv

from calendar_math import YearMonth
from memo import Memo, parse_date, parse_time
from memo_codec import MemoCodec, codec_for
from memo_store import MemoStore
from month_view import WEEKDAY_LABELS, MonthView, build_month_view
from navigation import NavigationState
from reminder import ReminderTask, schedule

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_KEY = "memos"


@dataclass
class AddResult:
    """Outcome of adding a memo."""
    memo: Memo
    reminder: ReminderTask | None
    job_id: str | None = None


class CalendarApp:
    """Holds the memo store and navigation state for one session.

    *prefs* is any object with ``get_string(key)`` and ``set_string(key,
    value)``; the Firestore-backed ``firestore_prefs`` module is used when
    none is given. Every mutation writes the whole store back through
    *prefs*. A failed write is logged and the in-memory change is kept.

    Store access goes through ``lock``. Callers that move ``navigation``
    from several threads hold it too.
    """

    def __init__(self, prefs=None, dispatcher=None, *, codec: MemoCodec | None = None,
                 key: str | None = None, today: date | None = None):
        if prefs is None:
            import firestore_prefs as prefs
        self.prefs = prefs
        self.dispatcher = dispatcher
        self.codec = codec or codec_for(os.environ.get("CALENDAR_MEMO_FORMAT"))
        self.key = key or os.environ.get("CALENDAR_MEMO_KEY") or DEFAULT_KEY
        self.store = MemoStore(codec=self.codec)
        self.navigation = NavigationState.starting_at(today)
        self.lock = threading.RLock()

    def load(self) -> int:
        """Replace the in-memory store with the persisted one. Returns the memo count."""
        raw = self.prefs.get_string(self.key)
        with self.lock:
            self.store = MemoStore.deserialize(raw, codec=self.codec)
            count = len(self.store)
        logger.info("Loaded %d memos from key %r", count, self.key)
        return count

    def memos_on(self, d: date) -> list[Memo]:
        with self.lock:
            return self.store.memos_on(d)

    def month_view(self, today: date | None = None) -> MonthView:
        with self.lock:
            return build_month_view(self.navigation, self.store, today)

    def add_memo(self, d: date, content: str, t: time | None = None, *,
                 now: datetime | None = None, replace: bool = False) -> AddResult:
        """Add a memo and, if it has a future time, schedule its reminder.

        With *replace*, memos already on *d* are removed first so the day
        ends up with just this one. *t* must be a plain local time; an offset
        or fractional seconds raise ``ValueError`` before anything is stored.
        """
        if t is not None:
            t = parse_time(t)
        memo = Memo(date=d, time=t, content=content)
        self.codec.check(memo)
        with self.lock:
            if replace:
                self.store.remove_by_date(d)
            self.store.add(memo)
            self._persist()

        if now is None:
            now = datetime.now()
        task = schedule(memo, now)
        if task is None:
            if t is not None:
                logger.debug("Reminder for %s %s already passed; not scheduled", d, t)
            return AddResult(memo=memo, reminder=None)

        job_id = None
        if self.dispatcher is not None:
            try:
                job_id = self.dispatcher.dispatch(task, now=now)
            except Exception:
                logger.warning("Could not schedule reminder for %s", task.fire_at, exc_info=True)
        return AddResult(memo=memo, reminder=task, job_id=job_id)

    def replace_memo(self, d: date, content: str, t: time | None = None, *,
                     now: datetime | None = None) -> AddResult:
        return self.add_memo(d, content, t, now=now, replace=True)

    def remove_memo(self, memo: Memo) -> bool:
        """Remove one memo equal to *memo*. Its reminder, if any, still fires."""
        with self.lock:
            removed = self.store.remove(memo)
            if removed:
                self._persist()
        return removed

    def remove_memos_on(self, d: date) -> int:
        with self.lock:
            count = self.store.remove_by_date(d)
            if count:
                self._persist()
        return count

    def _persist(self) -> None:
        try:
            self.prefs.set_string(self.key, self.store.serialize())
        except Exception:
            logger.warning("Failed to persist memos under key %r", self.key, exc_info=True)


def render_month(view: MonthView) -> str:
    """Plain-text month grid; days carrying memos are marked with ``*``."""
    lines = [view.title, " ".join(f"{label:>2}" for label in WEEKDAY_LABELS)]
    row: list[str] = []
    for cell in view.cells:
        if cell is None:
            row.append("   ")
        else:
            row.append(f"{cell.date.day:>2}" + ("*" if cell.memo_count else " "))
        if len(row) == 7:
            lines.append("".join(row).rstrip())
            row = []
    if row:
        lines.append("".join(row).rstrip())
    return "\n".join(lines)


def _format_memo(memo: Memo) -> str:
    stamp = memo.date.isoformat()
    if memo.time is not None:
        stamp += " " + memo.time.strftime("%H:%M")
    return f"{stamp}  {memo.content}"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: inspect and edit memos from the terminal."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="Calendar memos")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print a month grid")
    show.add_argument("--month", type=YearMonth.parse, default=None,
                      help="Month to show as YYYY-MM (default: this month)")

    list_cmd = sub.add_parser("list", help="List memos on a date")
    list_cmd.add_argument("--date", type=parse_date, required=True)

    add = sub.add_parser("add", help="Add a memo")
    add.add_argument("--date", type=parse_date, required=True)
    add.add_argument("--time", type=parse_time, default=None,
                     help="Reminder time as HH:MM")
    add.add_argument("--content", required=True)
    add.add_argument("--replace", action="store_true",
                     help="Drop other memos on the same date first")

    remove = sub.add_parser("remove", help="Remove memos on a date")
    remove.add_argument("--date", type=parse_date, required=True)
    remove.add_argument("--content", default=None,
                        help="Only remove the memo with this content")
    remove.add_argument("--time", type=parse_time, default=None)

    args = parser.parse_args(argv)

    app = CalendarApp()
    try:
        app.load()
    except Exception:
        logger.exception("Could not load memos")
        sys.exit(1)

    if args.command == "show":
        if args.month is not None:
            try:
                app.navigation.jump_to(args.month)
            except ValueError as exc:
                parser.error(str(exc))
        print(render_month(app.month_view()))
    elif args.command == "list":
        for memo in app.memos_on(args.date):
            print(_format_memo(memo))
    elif args.command == "add":
        if not args.content.strip():
            parser.error("--content must not be empty")
        try:
            result = app.add_memo(args.date, args.content, args.time, replace=args.replace)
        except ValueError as exc:
            parser.error(str(exc))
        print(f"Added: {_format_memo(result.memo)}")
        if result.reminder is not None:
            print(f"Reminder due at {result.reminder.fire_at.isoformat(timespec='minutes')}")
    elif args.command == "remove":
        if args.content is None:
            count = app.remove_memos_on(args.date)
        else:
            count = int(app.remove_memo(Memo(date=args.date, time=args.time, content=args.content)))
        print(f"Removed {count} memo(s)")


if __name__ == "__main__":
    main()
