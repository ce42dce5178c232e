"""Scheduler for the notification batch jobs.

Jobs run on their own ``schedule.Scheduler`` in a background thread owned
by ``BatchJobScheduler``, so the pipeline context can start and stop them
explicitly.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import schedule

from infrastructure.logging import get_module_logger

logger = get_module_logger()


def safe_run(job: Callable[[], object], name: Optional[str] = None):
    job_name = name or getattr(job, "__name__", repr(job))

    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:
            logger.error("scheduled_job_failed", job=job_name, error=str(e), exc_info=True)

    wrapper.__name__ = job_name
    return wrapper


@dataclass(frozen=True)
class ScheduledJob:
    """A job and its period in seconds."""

    name: str
    func: Callable[[], object]
    every_seconds: int


class BatchJobScheduler:
    """Run scheduled jobs in a background thread.

    Args:
        jobs: Jobs to register
        interval: Seconds between checks for pending jobs
        scheduler: Optional ``schedule.Scheduler`` (a private one by default)
    """

    def __init__(
        self,
        jobs: List[ScheduledJob],
        interval: float = 1,
        scheduler: Optional[schedule.Scheduler] = None,
    ) -> None:
        self.jobs = jobs
        self.interval = interval
        self.scheduler = scheduler or schedule.Scheduler()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def init(self) -> None:
        """Register every job with the scheduler."""
        self.scheduler.clear()
        for job in self.jobs:
            self.scheduler.every(job.every_seconds).seconds.do(
                safe_run(job.func, job.name)
            )
            logger.info(
                "scheduled_job_registered", job=job.name, every_seconds=job.every_seconds
            )

    def start(self) -> None:
        """Register the jobs and start the scheduler thread.

        Missed runs are not replayed: a job that falls behind runs once on
        the next check.
        """
        if self._thread is not None and self._thread.is_alive():
            return
        self.init()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_continuously, daemon=True, name="batch-job-scheduler"
        )
        self._thread.start()
        logger.info("scheduled_tasks_started", jobs=[job.name for job in self.jobs])

    def _run_continuously(self) -> None:
        while not self._stop_event.is_set():
            self.scheduler.run_pending()
            self._stop_event.wait(self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the thread; a job already running is allowed to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self.scheduler.clear()
        logger.info("scheduled_tasks_stopped")

    def run_all(self) -> None:
        """Run every job once, immediately, in the calling thread."""
        for job in self.jobs:
            started = time.monotonic()
            safe_run(job.func, job.name)()
            logger.info(
                "scheduled_job_ran",
                job=job.name,
                duration_seconds=round(time.monotonic() - started, 3),
            )
