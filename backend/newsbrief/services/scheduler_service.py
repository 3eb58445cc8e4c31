"""Scheduler service - recurring cron-driven news fetch runs."""

import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsbrief.constants.settings_defaults import CRON_ENABLED, CRON_SCHEDULE, DEFAULT_SCHEDULE
from newsbrief.exceptions import FetchInProgressError
from newsbrief.repositories import SystemSettingRepository
from newsbrief.services.fetch_runner import FetchRunner

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Keeps at most one recurring fetch job registered.

    One instance is created by the application lifespan and shared through
    `app.state`; tests build their own.
    """

    JOB_ID = "news-fetch"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        runner: FetchRunner,
        scheduler: AsyncIOScheduler | None = None,
    ):
        self.session_factory = session_factory
        self.runner = runner
        self._scheduler = scheduler or AsyncIOScheduler()
        self._schedule: str | None = None

    @property
    def is_scheduled(self) -> bool:
        return self._scheduler.running and self._scheduler.get_job(self.JOB_ID) is not None

    @property
    def schedule(self) -> str | None:
        """Cron expression of the active job."""
        return self._schedule if self.is_scheduled else None

    @property
    def next_run_time(self) -> datetime | None:
        job = self._scheduler.get_job(self.JOB_ID) if self._scheduler.running else None
        return job.next_run_time if job else None

    async def init(self) -> None:
        """Start from persisted settings. Does nothing when a job is already registered."""
        if self.is_scheduled:
            return

        try:
            async with self.session_factory() as session:
                settings_repo = SystemSettingRepository(session)
                enabled = await settings_repo.get(CRON_ENABLED) == "true"
                schedule = await settings_repo.get(CRON_SCHEDULE) or DEFAULT_SCHEDULE
        except Exception:
            logger.exception("[Scheduler] Initialization failed")
            return

        logger.info(f"[Scheduler] Init - Enabled: {enabled}, Schedule: {schedule}")
        if enabled:
            self.start(schedule)

    def start(self, schedule: str) -> bool:
        """
        Replace the recurring job with one for `schedule`.

        Returns False and stays stopped when the expression is invalid.
        """
        self.stop()

        try:
            trigger = CronTrigger.from_crontab(schedule)
        except ValueError as e:
            logger.error(f"[Scheduler] Invalid cron expression '{schedule}': {e}")
            return False

        if not self._scheduler.running:
            self._scheduler.start()

        self._scheduler.add_job(
            self._tick,
            trigger,
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._schedule = schedule
        logger.info(f"[Scheduler] Starting news fetch schedule: {schedule}")
        return True

    def stop(self) -> None:
        if self._scheduler.running and self._scheduler.get_job(self.JOB_ID):
            self._scheduler.remove_job(self.JOB_ID)
            logger.info("[Scheduler] Stopped schedule")
        self._schedule = None

    async def update_schedule(self, schedule: str, enabled: bool) -> bool:
        """
        Persist schedule and enabled flag, then start or stop.

        Returns whether a job is active afterwards.
        """
        async with self.session_factory() as session:
            settings_repo = SystemSettingRepository(session)
            await settings_repo.set(CRON_SCHEDULE, schedule)
            await settings_repo.set(CRON_ENABLED, "true" if enabled else "false")

        if enabled:
            return self.start(schedule)

        self.stop()
        return False

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._schedule = None

    async def _tick(self) -> None:
        logger.info("[Scheduler] Running scheduled news fetch...")
        try:
            log = await self.runner.run()
        except FetchInProgressError:
            logger.warning("[Scheduler] Previous fetch still running, skipping this tick")
            return
        except Exception:
            logger.exception("[Scheduler] Scheduled fetch failed")
            return

        logger.info(f"[Scheduler] Fetch completed with status {log.status} ({log.total_saved} saved)")
