"""
Background job scheduler for short-lived timers.
Uses APScheduler for one-shot jobs such as the delete-confirm auto-disarm.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for a pending one-shot job."""

    def __init__(self, job):
        self.job = job

    def cancel(self):
        try:
            self.job.remove()
        except JobLookupError:
            # Already ran or was removed
            pass


class BackgroundJobScheduler:
    """Manages background jobs for the application."""

    def __init__(self):
        self.scheduler = BackgroundScheduler()

    def start(self):
        """Start the background job scheduler."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Background job scheduler started")

    def stop(self):
        """Stop the background job scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Background job scheduler stopped")

    def call_later(self, delay_seconds: float, func: Callable[[], None]) -> ScheduledCall:
        """Run func once after delay_seconds; the returned handle cancels it."""
        job = self.scheduler.add_job(
            func=func,
            trigger=DateTrigger(run_date=datetime.now() + timedelta(seconds=delay_seconds)),
            misfire_grace_time=None,
        )
        return ScheduledCall(job)


# Global scheduler instance
scheduler = BackgroundJobScheduler()
