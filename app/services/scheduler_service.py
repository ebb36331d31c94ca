import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger


logger = logging.getLogger(__name__)

class EPGScheduler:
    """Scheduler for refreshing the cached EPG ahead of expiry"""

    def __init__(self):
        self.scheduler: AsyncIOScheduler | None = None
        self._refresh_func: Callable[[], Awaitable[bytes]] | None = None

    async def _refresh_job(self) -> None:
        """Background job that rebuilds the cached EPG"""
        logger.info("Scheduled EPG refresh triggered")
        if self._refresh_func is None:
            logger.error("Scheduled refresh has no refresh function configured")
            return
        try:
            await self._refresh_func()
        except Exception as e:
            logger.error(f"Scheduled EPG refresh failed: {e}", exc_info=True)

    def start(self, cron: str, refresh_func: Callable[[], Awaitable[bytes]]) -> None:
        """Start the scheduler with the EPG refresh job"""
        if self.scheduler and self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        try:
            trigger = CronTrigger.from_crontab(cron, timezone='UTC')
        except (ValueError, KeyError) as exc:
            logger.error("Invalid cron expression '%s': %s", cron, exc)
            raise

        self._refresh_func = refresh_func
        self.scheduler = AsyncIOScheduler(timezone='UTC')
        self.scheduler.add_job(
            self._refresh_job,
            trigger=trigger,
            id='epg_refresh',
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        next_time = self.get_next_run_time()
        logger.info(
            "Scheduler started. Next refresh: %s",
            next_time.isoformat() if next_time else "unknown"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler"""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")
        self.scheduler = None
        self._refresh_func = None

    @property
    def running(self) -> bool:
        return bool(self.scheduler and self.scheduler.running)

    def get_next_run_time(self) -> datetime | None:
        """Get next scheduled refresh time"""
        if not self.scheduler:
            return None
        job = self.scheduler.get_job('epg_refresh')
        return job.next_run_time if job else None


epg_scheduler = EPGScheduler()
