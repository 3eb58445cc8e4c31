"""Fetch runner - builds fresh collaborators per run and allows one run at a time."""

import asyncio
import logging
import time
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsbrief.config import Settings, get_settings
from newsbrief.exceptions import ConfigurationError, FetchInProgressError
from newsbrief.models import FetchLog
from newsbrief.repositories import CategoryRepository, FetchLogRepository
from newsbrief.services.fetch_service import NewsFetchService, create_news_fetch_service

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[AsyncSession, Settings], NewsFetchService]


class FetchRunner:
    """
    Entry point shared by the manual trigger and the scheduler.

    Each run opens its own session and re-reads configuration, so settings
    changed between runs take effect without a restart.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings_provider: Callable[[], Settings] = get_settings,
        service_factory: ServiceFactory = create_news_fetch_service,
    ):
        self.session_factory = session_factory
        self.settings_provider = settings_provider
        self.service_factory = service_factory
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> FetchLog:
        """
        Execute one logged fetch run.

        Raises:
            FetchInProgressError: another run has not finished yet
        """
        if self._lock.locked():
            raise FetchInProgressError("A news fetch is already running")

        async with self._lock:
            async with self.session_factory() as session:
                return await self._run(session)

    async def _run(self, session: AsyncSession) -> FetchLog:
        fetch_log_repo = FetchLogRepository(session)
        started = time.perf_counter()

        try:
            service = self.service_factory(session, self.settings_provider())
        except ConfigurationError as e:
            logger.error(f"News fetch aborted: {e}")
            return await fetch_log_repo.save(
                status="error",
                duration_ms=int((time.perf_counter() - started) * 1000),
                error_message=str(e),
            )

        try:
            return await service.execute_fetch_and_log(CategoryRepository(session), fetch_log_repo)
        finally:
            await service.close()
