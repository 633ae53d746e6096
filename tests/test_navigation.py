"""Tests for navigation state transitions."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from calendar_math import MAX_MONTH, MIN_MONTH, YearMonth
from navigation import NavigationState, slide_direction


def _state(year: int = 2024, month: int = 1) -> NavigationState:
    return NavigationState(current_month=YearMonth(year, month))


def test_previous_and_next():
    state = _state(2024, 1)
    state.go_to_previous_month()
    assert state.current_month == YearMonth(2023, 12)
    assert state.last_direction == -1

    state.go_to_next_month()
    state.go_to_next_month()
    assert state.current_month == YearMonth(2024, 2)
    assert state.last_direction == 1


def test_go_to_today_forward():
    state = _state(2024, 1)
    state.go_to_today(today=date(2024, 3, 5))
    assert state.last_direction == 1
    assert state.current_month == YearMonth(2024, 3)
    assert state.selected_date == date(2024, 3, 5)


def test_go_to_today_backward():
    state = _state(2024, 5)
    state.go_to_today(today=date(2024, 3, 5))
    assert state.last_direction == -1
    assert state.current_month == YearMonth(2024, 3)


def test_go_to_today_same_month():
    state = _state(2024, 3)
    state.go_to_today(today=date(2024, 3, 5))
    assert state.last_direction == 0


def test_jump_to():
    state = _state(2024, 6)
    state.jump_to(YearMonth(2019, 8))
    assert state.current_month == YearMonth(2019, 8)
    assert state.last_direction == -1
    state.jump_to(YearMonth(2030, 1))
    assert state.last_direction == 1
    state.jump_to(YearMonth(2030, 1))
    assert state.last_direction == 0


def test_select_date_outside_current_month():
    state = _state(2024, 1)
    state.select_date(date(2025, 7, 4))
    assert state.selected_date == date(2025, 7, 4)
    assert state.current_month == YearMonth(2024, 1)


def test_drag_end():
    state = _state(2024, 1)
    state.on_drag_end(120.0)
    assert state.current_month == YearMonth(2023, 12)
    assert state.last_direction == -1
    state.on_drag_end(-40.5)
    assert state.current_month == YearMonth(2024, 1)
    assert state.last_direction == 1


def test_drag_end_without_movement():
    state = _state(2024, 1)
    listener = MagicMock()
    state.subscribe(listener)
    state.on_drag_end(0)
    assert state.current_month == YearMonth(2024, 1)
    listener.assert_not_called()


def test_starting_at():
    state = NavigationState.starting_at(date(2024, 2, 29))
    assert state.current_month == YearMonth(2024, 2)
    assert state.selected_date is None
    assert state.last_direction == 0


def test_listeners_notified_and_unsubscribed():
    state = _state()
    listener = MagicMock()
    unsubscribe = state.subscribe(listener)

    state.go_to_next_month()
    listener.assert_called_once_with(state)

    unsubscribe()
    state.go_to_next_month()
    listener.assert_called_once()


def test_failing_listener_does_not_break_transition():
    state = _state()
    state.subscribe(MagicMock(side_effect=RuntimeError("boom")))
    after = MagicMock()
    state.subscribe(after)

    state.go_to_previous_month()

    assert state.current_month == YearMonth(2023, 12)
    after.assert_called_once()


def test_slide_direction():
    assert slide_direction(YearMonth(2024, 1), YearMonth(2024, 2)) == 1
    assert slide_direction(YearMonth(2024, 2), YearMonth(2024, 1)) == -1
    assert slide_direction(YearMonth(2024, 2), YearMonth(2024, 2)) == 0


def test_cannot_step_before_first_month():
    state = NavigationState(current_month=MIN_MONTH)
    listener = MagicMock()
    state.subscribe(listener)
    with pytest.raises(ValueError):
        state.go_to_previous_month()
    assert state.current_month == MIN_MONTH
    assert state.last_direction == 0
    listener.assert_not_called()


def test_cannot_step_past_last_month():
    state = NavigationState(current_month=MAX_MONTH)
    with pytest.raises(ValueError):
        state.on_drag_end(-10)
    assert state.current_month == MAX_MONTH


def test_jump_to_rejects_undisplayable_month():
    state = _state(2024, 1)
    with pytest.raises(ValueError):
        state.jump_to(YearMonth(10000, 1))
    with pytest.raises(ValueError):
        state.jump_to(YearMonth(0, 12))
    assert state.current_month == YearMonth(2024, 1)
