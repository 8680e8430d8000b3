"""Background scheduler for deferred and periodic cache refreshes.

Two kinds of jobs:
  - **Deferred re-fetch** (``schedule``): a one-shot ``date`` job that
    re-fetches a view shortly after a mutation, giving the backend time to
    settle. Scheduling the same job id again replaces the pending run.
  - **Periodic refresh** (``add_periodic``): an interval job that keeps the
    dashboard snapshots warm while the dashboard server runs.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .utils.config import get_config
from .utils.logger import get_cache_logger, get_scheduler_logger


def _wrap_job(job_id: str, func: Callable[[], object]) -> Callable[[], None]:
    """Log job start/end and keep exceptions out of the worker thread."""
    logger = get_cache_logger()

    def job():
        logger.debug(f"Refresh job {job_id} started at {datetime.now()}")
        try:
            func()
        except Exception as e:
            logger.error(f"Refresh job {job_id} failed: {str(e)}", exc_info=True)

    return job


class RefreshScheduler:
    """Runs cache refresh jobs on an APScheduler ``BackgroundScheduler``.

    The scheduler is started lazily by the first ``schedule`` or
    ``add_periodic`` call.
    """

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None):
        self.config = get_config()
        self.logger = get_cache_logger()
        get_scheduler_logger()

        self.scheduler = scheduler or BackgroundScheduler(
            timezone=self.config.refresh.timezone
        )
        self.default_delay = self.config.refresh.refetch_delay

    def _ensure_running(self):
        if not self.scheduler.running:
            self.scheduler.start()

    def schedule(self, job_id: str, func: Callable[[], object], delay: Optional[float] = None):
        """Run ``func`` once, ``delay`` seconds from now (default ``refresh.refetch_delay``)."""
        delay = self.default_delay if delay is None else delay
        self._ensure_running()
        self.scheduler.add_job(
            func=_wrap_job(job_id, func),
            trigger="date",
            run_date=datetime.now(self.scheduler.timezone) + timedelta(seconds=delay),
            id=job_id,
            name=f"Deferred refresh: {job_id}",
            replace_existing=True,
            misfire_grace_time=None
        )
        self.logger.debug(f"Scheduled {job_id} in {delay:.1f}s")

    def add_periodic(self, job_id: str, func: Callable[[], object], minutes: int):
        """Run ``func`` every ``minutes`` minutes."""
        self._ensure_running()
        self.scheduler.add_job(
            func=_wrap_job(job_id, func),
            trigger=IntervalTrigger(minutes=minutes),
            id=job_id,
            name=f"Periodic refresh: {job_id}",
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self.logger.info(f"Periodic refresh {job_id} every {minutes} min")

    def shutdown(self, wait: bool = False):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
