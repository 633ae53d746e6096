"""Read-only month grid model for whatever draws the calendar."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from calendar_math import YearMonth, is_weekend, month_cells
from memo_store import MemoStore
from navigation import NavigationState

WEEKDAY_LABELS = ["日", "一", "二", "三", "四", "五", "六"]  # Sunday first


@dataclass
class DayCell:
    date: date
    is_today: bool
    is_selected: bool
    is_weekend: bool
    memo_count: int
    preview: str | None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day": self.date.day,
            "is_today": self.is_today,
            "is_selected": self.is_selected,
            "is_weekend": self.is_weekend,
            "memo_count": self.memo_count,
            "preview": self.preview,
        }


@dataclass
class MonthView:
    month: YearMonth
    days_in_month: int
    first_weekday_offset: int
    last_direction: int
    selected_date: date | None
    cells: list[DayCell | None]

    @property
    def title(self) -> str:
        return f"{self.month.year}年{self.month.month}月"

    def to_dict(self) -> dict:
        return {
            "month": str(self.month),
            "title": self.title,
            "weekdays": WEEKDAY_LABELS,
            "days_in_month": self.days_in_month,
            "first_weekday_offset": self.first_weekday_offset,
            "last_direction": self.last_direction,
            "selected_date": self.selected_date.isoformat() if self.selected_date else None,
            "cells": [c.to_dict() if c is not None else None for c in self.cells],
        }


def build_month_view(navigation: NavigationState, store: MemoStore,
                     today: date | None = None) -> MonthView:
    """Lay out the month in *navigation* and annotate each day from *store*.

    A day's preview comes from its first memo, as the grid only has room
    for one.
    """
    if today is None:
        today = date.today()
    ym = navigation.current_month
    cells: list[DayCell | None] = []
    for d in month_cells(ym):
        if d is None:
            cells.append(None)
            continue
        memos = store.memos_on(d)
        cells.append(DayCell(
            date=d,
            is_today=d == today,
            is_selected=d == navigation.selected_date,
            is_weekend=is_weekend(d),
            memo_count=len(memos),
            preview=memos[0].preview() if memos else None,
        ))
    return MonthView(
        month=ym,
        days_in_month=ym.days_in_month(),
        first_weekday_offset=ym.first_weekday_offset(),
        last_direction=navigation.last_direction,
        selected_date=navigation.selected_date,
        cells=cells,
    )
