"""Which month is on screen, which date is selected, and which way we moved."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from calendar_math import MAX_MONTH, MIN_MONTH, YearMonth, add_months, compare, is_displayable

logger = logging.getLogger(__name__)

Listener = Callable[["NavigationState"], None]


def slide_direction(before: YearMonth, after: YearMonth) -> int:
    """Presentation hint for a month change: -1 back, 1 forward, 0 none."""
    return compare(after, before)


@dataclass
class NavigationState:
    """Session navigation state for the month grid.

    ``last_direction`` only tells the grid which way to slide. Nothing else
    reads it. Listeners registered with ``subscribe`` are called after every
    transition. Moves to a month outside ``MIN_MONTH``..``MAX_MONTH`` raise
    ``ValueError`` and leave the state as it was.
    """

    current_month: YearMonth
    selected_date: date | None = None
    last_direction: int = 0
    _listeners: list[Listener] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def starting_at(cls, today: date | None = None) -> NavigationState:
        if today is None:
            today = date.today()
        return cls(current_month=YearMonth.of(today))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def go_to_previous_month(self) -> None:
        self._move_to(add_months(self.current_month, -1), -1)

    def go_to_next_month(self) -> None:
        self._move_to(add_months(self.current_month, 1), 1)

    def go_to_today(self, today: date | None = None) -> None:
        if today is None:
            today = date.today()
        target = YearMonth.of(today)
        self.last_direction = compare(target, self.current_month)
        self.current_month = target
        self.selected_date = today
        self._notify()

    def jump_to(self, ym: YearMonth) -> None:
        self._move_to(ym, compare(ym, self.current_month))

    def select_date(self, d: date) -> None:
        self.selected_date = d
        self._notify()

    def on_drag_end(self, total_drag_x: float) -> None:
        """Finish a horizontal swipe: dragging right goes back a month, left goes forward."""
        if total_drag_x > 0:
            self.go_to_previous_month()
        elif total_drag_x < 0:
            self.go_to_next_month()

    def _move_to(self, target: YearMonth, direction: int) -> None:
        if not is_displayable(target):
            raise ValueError(f"{target} is outside {MIN_MONTH}..{MAX_MONTH}")
        self.current_month = target
        self.last_direction = direction
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Navigation listener failed")
