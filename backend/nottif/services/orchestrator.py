"""
Orchestrator: ties triggers, the event log, live updates and cron jobs together.

Every notification attempt (API, cron, test) goes through ``record_and_notify``
or ``record_event``; every config mutation keeps the persisted cron jobs and
the scheduler's live jobs in step.
"""
import uuid
from typing import AsyncIterator, List, Optional

from loguru import logger

from nottif.config import CronJob
from nottif.constants import TEST_EVENT_MESSAGE, TEST_MESSAGE, TEST_USERNAME
from nottif.models.event import Event, EventSource
from nottif.models.identity import Identity
from nottif.services.broadcaster import Broadcaster
from nottif.services.config_store import ConfigStore
from nottif.services.event_log import EventLog
from nottif.services.notifier import Notifier
from nottif.services.scheduler import APSchedulerEngine, ScheduleEngine, Scheduler
from nottif.utils.errors import ConfigWriteError, NotifierError, ScheduleError


class Orchestrator:
    """Composition point of ConfigStore, Notifier, Scheduler, EventLog and Broadcaster."""

    def __init__(
        self,
        config_store: ConfigStore,
        notifier: Notifier,
        engine: Optional[ScheduleEngine] = None,
        broadcaster: Optional[Broadcaster] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.config_store = config_store
        self.notifier = notifier
        self.broadcaster = broadcaster or Broadcaster()
        self.event_log = event_log or EventLog(publish=self.broadcaster.publish)
        self.scheduler = Scheduler(engine or APSchedulerEngine(), notifier, self.record_event)

    async def start(self):
        """Register every persisted job, then let the scheduler fire."""
        async with self.config_store.read_lock() as config:
            jobs = list(config.cron_jobs)
            scheduled = self.scheduler.load_jobs(jobs)
        if scheduled != len(jobs):
            logger.warning(f"{len(jobs) - scheduled} persisted cron job(s) could not be scheduled")
        self.scheduler.start()

    async def shutdown(self):
        self.scheduler.shutdown()
        self.broadcaster.close_all()
        await self.notifier.close()

    # ==========================
    # EVENTS
    # ==========================
    async def record_event(self, source: EventSource, message: str, success: bool) -> Event:
        return await self.event_log.record(source, message, success)

    async def record_and_notify(
        self,
        source: EventSource,
        message: str,
        identity: Optional[Identity] = None,
        display_message: Optional[str] = None,
    ) -> bool:
        """Attempt one delivery and log the outcome. Returns whether it succeeded."""
        success = True
        try:
            await self.notifier.send(message, identity)
        except NotifierError as e:
            logger.warning(f"{EventSource(source).value} notification failed: {e}")
            success = False

        await self.record_event(source, display_message if display_message is not None else message, success)
        return success

    async def send_test_notification(self) -> bool:
        return await self.record_and_notify(
            EventSource.TEST,
            TEST_MESSAGE,
            Identity(username=TEST_USERNAME),
            display_message=TEST_EVENT_MESSAGE,
        )

    def current_events(self) -> List[Event]:
        """Snapshot of the event log, newest first."""
        return self.event_log.snapshot()

    async def subscribe_to_events(self, include_current: bool = False) -> AsyncIterator[str]:
        """
        Live sequence of serialized full-log snapshots.

        Closing the generator (client disconnect, task cancellation) releases
        the subscription.
        """
        subscription = self.broadcaster.subscribe()
        try:
            if include_current:
                yield self.event_log.serialize()
            async for payload in subscription:
                yield payload
        finally:
            self.broadcaster.unsubscribe(subscription)

    # ==========================
    # CRON JOBS
    # ==========================
    async def list_cron_jobs(self) -> List[CronJob]:
        async with self.config_store.read_lock() as config:
            return list(config.cron_jobs)

    async def add_cron_job(self, message: str, schedule: str) -> CronJob:
        """
        Schedule then persist a new job.

        Raises:
            ScheduleError: invalid schedule; nothing changed
            ConfigWriteError: persisting failed; the job was unscheduled again
        """
        job = CronJob(id=str(uuid.uuid4()), message=message, schedule=schedule)

        async with self.config_store.write_lock() as config:
            self.scheduler.add_job(job)

            previous = config.cron_jobs
            config.cron_jobs = previous + [job]
            try:
                self.config_store.save()
            except ConfigWriteError:
                config.cron_jobs = previous
                self.scheduler.remove_job(job.id)
                raise

        logger.info(f"Added cron job {job.id}")
        return job

    async def remove_cron_job(self, job_id: str) -> Optional[CronJob]:
        """
        Unschedule then un-persist a job.

        Returns the removed job, or None when no such job exists (nothing changes).

        Raises:
            ConfigWriteError: persisting failed; the job was rescheduled and is still configured
        """
        async with self.config_store.write_lock() as config:
            job = config.find_job(job_id)
            if job is None:
                logger.info(f"Cron job '{job_id}' not found - nothing to delete")
                return None

            self.scheduler.remove_job(job_id)

            previous = config.cron_jobs
            config.cron_jobs = [j for j in previous if j.id != job_id]
            try:
                self.config_store.save()
            except ConfigWriteError:
                config.cron_jobs = previous
                try:
                    self.scheduler.add_job(job)
                except ScheduleError as e:
                    logger.error(f"Failed to reschedule cron job '{job_id}' after write failure: {e}")
                raise

        logger.info(f"Deleted cron job {job_id}")
        return job

    # ==========================
    # WEBHOOK
    # ==========================
    async def update_webhook_url(self, url: str):
        """
        Persist a new webhook URL, then switch the notifier over.

        Raises:
            ConfigWriteError: persisting failed; the old URL stays in effect
        """
        async with self.config_store.write_lock() as config:
            previous = config.webhook_url
            config.webhook_url = url
            try:
                self.config_store.save()
            except ConfigWriteError:
                config.webhook_url = previous
                raise
            self.notifier.set_webhook_url(url)
        logger.info("Webhook URL updated")

