"""Deferred reminder delivery on an APScheduler background scheduler.

Each submission becomes a one-shot ``DateTrigger`` job. When it fires, every
registered alert callback receives the payload text. There is no cancel
operation: once submitted, a reminder stays scheduled.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from reminder import ReminderTask

logger = logging.getLogger(__name__)

AlertCallback = Callable[[str], None]


def log_alert(payload: str) -> None:
    """Default alert: a log line carrying the reminder text."""
    logger.info("reminder: %s", payload)


class ReminderDispatcher:
    """Submit ``{payload, initial delay}`` jobs that fire once."""

    def __init__(self, scheduler: BackgroundScheduler | None = None,
                 alerts: list[AlertCallback] | None = None):
        self.scheduler = scheduler or BackgroundScheduler()
        self._alerts: list[AlertCallback] = list(alerts) if alerts else [log_alert]

    def add_alert(self, callback: AlertCallback) -> None:
        self._alerts.append(callback)

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Reminder scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler stopped")

    def submit(self, payload: str, initial_delay_millis: int,
               now: datetime | None = None) -> str:
        """Schedule *payload* to be delivered once after the delay. Returns the job id."""
        if initial_delay_millis <= 0:
            raise ValueError("Reminder delay must be positive")
        if now is None:
            now = datetime.now()
        run_date = now + timedelta(milliseconds=initial_delay_millis)
        job_id = f"reminder_{uuid.uuid4().hex}"
        self.scheduler.add_job(
            self._deliver,
            trigger=DateTrigger(run_date=run_date),
            args=[payload],
            id=job_id,
            misfire_grace_time=None,
        )
        logger.info("Scheduled reminder %s for %s", job_id, run_date.isoformat())
        return job_id

    def dispatch(self, task: ReminderTask, now: datetime | None = None) -> str:
        if now is None:
            now = datetime.now()
        return self.submit(task.content, task.delay_millis(now), now=now)

    def _deliver(self, payload: str) -> None:
        for callback in self._alerts:
            try:
                callback(payload)
            except Exception:
                logger.exception("Reminder alert callback failed")
