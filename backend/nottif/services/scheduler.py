"""
Cron scheduler.

Maps logical cron job IDs to handles in the underlying schedule engine
(APScheduler by default), and turns every firing into a notification plus a
``Cron`` event reported through a single callback.
"""
import asyncio
import functools
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Protocol, Set

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from nottif.config import CronJob
from nottif.constants import CRON_MAX_CONCURRENT_RUNS, CRON_MISFIRE_GRACE_SECONDS, CRON_USERNAME
from nottif.models.event import EventSource
from nottif.models.identity import Identity
from nottif.services.notifier import Notifier
from nottif.utils.errors import NotifierError, ScheduleError

# (source, message, success) -> recorded
RecordEventFunc = Callable[[EventSource, str, bool], Awaitable[Any]]

CRON_IDENTITY = Identity(username=CRON_USERNAME)


class ScheduleEngine(Protocol):
    """Timer capability: run a coroutine function on a cron expression."""

    def register(self, expression: str, func: Callable[[], Awaitable[None]]) -> Any:
        """Return an opaque handle, or raise ScheduleError for an invalid expression."""
        ...

    def cancel(self, handle: Any) -> None:
        ...

    def start(self) -> None:
        ...

    def shutdown(self) -> None:
        ...


class APSchedulerEngine:
    """ScheduleEngine on APScheduler's AsyncIOScheduler with crontab triggers."""

    def __init__(self, timezone: Optional[str] = None):
        kwargs = {"timezone": timezone} if timezone else {}
        self._scheduler = AsyncIOScheduler(**kwargs)

    def register(self, expression: str, func: Callable[[], Awaitable[None]]) -> str:
        try:
            trigger = CronTrigger.from_crontab(expression, timezone=self._scheduler.timezone)
        except ValueError as e:
            raise ScheduleError(f"invalid cron expression '{expression}': {e}") from e

        job = self._scheduler.add_job(
            func,
            trigger,
            max_instances=CRON_MAX_CONCURRENT_RUNS,
            misfire_grace_time=CRON_MISFIRE_GRACE_SECONDS,
            coalesce=True,
        )
        return job.id

    def cancel(self, handle: str):
        try:
            self._scheduler.remove_job(handle)
        except JobLookupError:
            logger.warning(f"APScheduler job {handle} already gone")

    def start(self):
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self):
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)


class Scheduler:
    """
    Lifecycle of cron jobs: Unregistered -> Scheduled -> Removed.

    Never touches the event log directly; firing outcomes go through
    ``record_event``.
    """

    def __init__(self, engine: ScheduleEngine, notifier: Notifier, record_event: RecordEventFunc):
        self.engine = engine
        self.notifier = notifier
        self.record_event = record_event
        self._handles: Dict[str, Any] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def job_ids(self) -> Set[str]:
        """IDs of currently scheduled jobs."""
        return set(self._handles)

    def add_job(self, job: CronJob):
        """
        Register a job with the engine.

        Raises:
            ScheduleError: expression rejected or ID already scheduled; the job is not registered
        """
        if job.id in self._handles:
            raise ScheduleError(f"cron job '{job.id}' is already scheduled")

        handle = self.engine.register(job.schedule, functools.partial(self._fire, job))
        self._handles[job.id] = handle
        logger.info(f"Scheduled cron job '{job.message}' with schedule '{job.schedule}'")

    def remove_job(self, job_id: str) -> bool:
        """Deregister a job. Unknown IDs are logged and ignored; returns whether it was scheduled."""
        handle = self._handles.pop(job_id, None)
        if handle is None:
            logger.info(f"Cron job '{job_id}' not found in scheduler - nothing to remove")
            return False

        self.engine.cancel(handle)
        logger.info(f"Removed cron job '{job_id}' from scheduler")
        return True

    def load_jobs(self, jobs: Iterable[CronJob]) -> int:
        """Register persisted jobs at startup, skipping invalid ones. Returns the number scheduled."""
        scheduled = 0
        for job in jobs:
            try:
                self.add_job(job)
                scheduled += 1
            except ScheduleError as e:
                logger.error(f"Skipping cron job '{job.id}' ({job.message}): {e}")
        return scheduled

    def start(self):
        self.engine.start()
        self._running = True
        logger.info(f"Cron scheduler started with {len(self._handles)} job(s)")

    def shutdown(self):
        self._running = False
        self.engine.shutdown()
        logger.info("Cron scheduler stopped")

    async def _fire(self, job: CronJob):
        """One tick: send and report. Failures end up in the event log, never in the engine."""
        logger.info(f"Running cron job: {job.message}")
        success = False
        try:
            await self.notifier.send(job.message, CRON_IDENTITY)
            success = True
        except asyncio.CancelledError:
            raise
        except NotifierError as e:
            logger.warning(f"Cron job '{job.id}' delivery failed: {e}")
        except Exception as e:
            logger.error(f"Cron job '{job.id}' crashed: {type(e).__name__}: {e}")

        try:
            await self.record_event(EventSource.CRON, job.message, success)
        except Exception as e:
            logger.error(f"Failed to record cron event for '{job.id}': {e}")
