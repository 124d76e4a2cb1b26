"""
Periodic driver for the tracker.

Two independent interval jobs share one event loop: the tracking tick and
the idle browser sweep. Neither job may overlap itself.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from pricewatch.core.config import Settings
from pricewatch.core.logger import get_logger
from pricewatch.domain.models import TickSummary
from pricewatch.services.tracking import TrackingService
from pricewatch.services.utils.browser_manager import BrowserSessionManager

logger = get_logger(__name__)

TRACKING_JOB_ID = "tracking_tick"
IDLE_SWEEP_JOB_ID = "idle_browser_sweep"


class TrackerScheduler:
    """Runs tracking ticks and idle sweeps on their own cadences."""

    def __init__(
        self,
        tracking: TrackingService,
        browser: BrowserSessionManager,
        tracking_interval_seconds: int = 60,
        idle_sweep_interval_seconds: int = 300,
    ):
        self.tracking = tracking
        self.browser = browser
        self.tracking_interval_seconds = tracking_interval_seconds
        self.idle_sweep_interval_seconds = idle_sweep_interval_seconds
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)

    @classmethod
    def from_settings(
        cls, settings: Settings, tracking: TrackingService, browser: BrowserSessionManager
    ) -> "TrackerScheduler":
        return cls(
            tracking,
            browser,
            tracking_interval_seconds=settings.tracking_interval_seconds,
            idle_sweep_interval_seconds=settings.idle_sweep_interval_seconds,
        )

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Register both jobs and start the scheduler (needs a running loop)."""
        if self.scheduler.running:
            logger.warning("scheduler_already_running")
            return

        self.scheduler.add_job(
            self.run_tracking_tick,
            "interval",
            seconds=self.tracking_interval_seconds,
            id=TRACKING_JOB_ID,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.run_idle_sweep,
            "interval",
            seconds=self.idle_sweep_interval_seconds,
            id=IDLE_SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(
            "scheduler_started",
            tracking_interval_s=self.tracking_interval_seconds,
            idle_sweep_interval_s=self.idle_sweep_interval_seconds,
        )

    async def shutdown(self) -> None:
        """Stop scheduling and release the browser."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        await self.browser.close()
        logger.info("scheduler_stopped")

    async def run_forever(self) -> None:
        """Start the jobs and keep running until cancelled."""
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.shutdown()

    async def run_tracking_tick(self) -> Optional[TickSummary]:
        try:
            return await self.tracking.run_tick()
        except Exception as e:
            logger.exception("tracking_tick_failed", error=str(e))
            return None

    async def run_idle_sweep(self) -> bool:
        try:
            return await self.browser.close_if_idle()
        except Exception as e:
            logger.exception("idle_sweep_failed", error=str(e))
            return False
