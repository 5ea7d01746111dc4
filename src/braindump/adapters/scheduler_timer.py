"""APScheduler-backed delayed actions."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class ScheduledAction:
    """Handle for a one-shot scheduler job."""

    def __init__(self, job):
        self._job = job

    def cancel(self) -> None:
        try:
            self._job.remove()
        except JobLookupError:
            # Already ran or already cancelled.
            pass


class SchedulerTimer:
    """
    Timer on top of an APScheduler scheduler.

    Implements Timer protocol. Works with BackgroundScheduler for the CLI and
    AsyncIOScheduler for the bot; the caller owns the scheduler's lifecycle.
    """

    def __init__(self, scheduler: BaseScheduler):
        self.scheduler = scheduler

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledAction:
        run_at = datetime.now(timezone.utc) + timedelta(seconds=delay)
        job = self.scheduler.add_job(callback, DateTrigger(run_date=run_at))
        logger.debug(f"Scheduled {getattr(callback, '__name__', 'action')} in {delay}s")
        return ScheduledAction(job)
