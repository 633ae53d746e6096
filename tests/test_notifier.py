"""Tests for the reminder dispatcher."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from apscheduler.triggers.date import DateTrigger

from notifier import ReminderDispatcher, log_alert
from reminder import ReminderTask

NOW = datetime(2024, 1, 1, 10, 0)


def _dispatcher(**kwargs) -> tuple[ReminderDispatcher, MagicMock]:
    scheduler = MagicMock()
    return ReminderDispatcher(scheduler=scheduler, **kwargs), scheduler


def test_submit_adds_one_shot_job():
    dispatcher, scheduler = _dispatcher()

    job_id = dispatcher.submit("lunch", 9_000_000, now=NOW)

    assert job_id.startswith("reminder_")
    scheduler.add_job.assert_called_once()
    _, kwargs = scheduler.add_job.call_args
    assert isinstance(kwargs["trigger"], DateTrigger)
    assert kwargs["trigger"].run_date.replace(tzinfo=None) == datetime(2024, 1, 1, 12, 30)
    assert kwargs["args"] == ["lunch"]
    assert kwargs["id"] == job_id


@pytest.mark.parametrize("delay", [0, -1])
def test_submit_refuses_non_positive_delay(delay):
    dispatcher, scheduler = _dispatcher()
    with pytest.raises(ValueError):
        dispatcher.submit("late", delay, now=NOW)
    scheduler.add_job.assert_not_called()


def test_dispatch_uses_task_fire_time():
    dispatcher, scheduler = _dispatcher()
    task = ReminderTask(content="standup", fire_at=datetime(2024, 1, 1, 10, 15))

    dispatcher.dispatch(task, now=NOW)

    _, kwargs = scheduler.add_job.call_args
    assert kwargs["trigger"].run_date.replace(tzinfo=None) == task.fire_at
    assert kwargs["args"] == ["standup"]


def test_delivery_calls_every_alert():
    first, second = MagicMock(), MagicMock()
    dispatcher, _ = _dispatcher(alerts=[first, second])

    dispatcher._deliver("lunch")

    first.assert_called_once_with("lunch")
    second.assert_called_once_with("lunch")


def test_failing_alert_does_not_block_others():
    broken = MagicMock(side_effect=RuntimeError("boom"))
    ok = MagicMock()
    dispatcher, _ = _dispatcher(alerts=[broken, ok])

    dispatcher._deliver("lunch")

    ok.assert_called_once_with("lunch")


def test_add_alert():
    dispatcher, _ = _dispatcher(alerts=[])
    callback = MagicMock()
    dispatcher.add_alert(callback)
    dispatcher._deliver("x")
    callback.assert_called_once_with("x")


def test_default_alert_logs(caplog):
    dispatcher, _ = _dispatcher()
    with caplog.at_level("INFO", logger="notifier"):
        dispatcher._deliver("water plants")
    assert "reminder: water plants" in caplog.text


def test_log_alert(caplog):
    with caplog.at_level("INFO", logger="notifier"):
        log_alert("hello")
    assert "hello" in caplog.text


def test_start_and_shutdown():
    dispatcher, scheduler = _dispatcher()
    scheduler.running = False
    dispatcher.start()
    scheduler.start.assert_called_once()

    scheduler.running = True
    dispatcher.shutdown()
    scheduler.shutdown.assert_called_once_with(wait=False)
