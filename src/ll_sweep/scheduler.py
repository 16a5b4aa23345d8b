"""Runs ExpirationSweep on a fixed interval as an APScheduler interval job.

The first run fires as soon as the scheduler starts; later runs follow the
interval. Only one sweep runs at a time and missed runs are coalesced.
"""

import asyncio
import logging
from datetime import timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config.settings import settings
from src.ll_common.datetime_utils import utc_now
from src.ll_sweep.expiration import ExpirationSweep, SweepReport

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "expiration_sweep"


class SweepScheduler:
    def __init__(
        self,
        sweep: ExpirationSweep,
        interval_seconds: float = settings.SWEEP_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._sweep = sweep
        self._interval = interval_seconds
        self._scheduler: AsyncIOScheduler | None = None
        self._current: asyncio.Task[None] | None = None
        self.last_report: SweepReport | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the interval job; calling start twice keeps the first scheduler."""
        if self.running:
            logger.warning("Sweep scheduler already running")
            return
        scheduler = AsyncIOScheduler(timezone=timezone.utc)
        scheduler.add_job(
            self._run_sweep,
            IntervalTrigger(seconds=self._interval, timezone=timezone.utc),
            id=SWEEP_JOB_ID,
            name="Expire listings and send renewal notices",
            next_run_time=utc_now(),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Sweep scheduler started: interval=%ss", self._interval)

    async def stop(self) -> None:
        """Shut the scheduler down and wait for an in-flight sweep to finish."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        if self._current is not None and not self._current.done():
            await self._current
        logger.info("Sweep scheduler stopped after %d runs", self.runs)

    async def _run_sweep(self) -> None:
        self._current = asyncio.current_task()
        try:
            self.last_report = await self._sweep.run_once()
        except Exception:
            logger.exception("Sweep run failed")
        finally:
            self.runs += 1
