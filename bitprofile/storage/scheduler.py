"""
Periodic background consolidation with an adaptive interval.

After each pass the wait before the next one is adjusted:

    heavy pass (> 1000 entries read or > 1 s): interval * 1.5
    light pass:                                interval * 0.8

clamped to [min_interval, max_interval].

Usage:
    async with ConsolidationScheduler(store) as scheduler:
        ...  # passes run in the background
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from bitprofile.config.settings import BitProfileConfig
from bitprofile.storage.record_store import ConsolidationReport, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 60.0
DEFAULT_MAX_INTERVAL = 300.0
GROWTH_FACTOR = 1.5
SHRINK_FACTOR = 0.8
HEAVY_ENTRY_COUNT = 1000
HEAVY_DURATION_SECONDS = 1.0


@dataclass
class SchedulerStats:
    """Scheduler statistics for monitoring"""

    passes_completed: int = 0
    passes_failed: int = 0
    passes_skipped: int = 0
    last_run_at: Optional[datetime] = None
    last_error: Optional[str] = None
    last_report: Optional[ConsolidationReport] = None


class ConsolidationScheduler:
    """
    Runs RecordStore.consolidate() in the background.

    Passes never overlap: run_once() called while a pass is in flight
    returns None immediately. A failing pass is logged and the loop keeps
    going with an unchanged interval.
    """

    def __init__(
        self,
        store: RecordStore,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        max_interval: float = DEFAULT_MAX_INTERVAL,
        initial_interval: Optional[float] = None,
        paths: Optional[Iterable[Path]] = None,
    ):
        if min_interval <= 0:
            raise ValueError(f"min_interval must be positive, got {min_interval}")
        if max_interval < min_interval:
            raise ValueError(
                f"max_interval ({max_interval}) must be >= min_interval ({min_interval})"
            )

        self.store = store
        self.min_interval = float(min_interval)
        self.max_interval = float(max_interval)
        self.interval = self._clamp(
            initial_interval if initial_interval is not None else min_interval
        )
        self.paths: Optional[List[Path]] = list(paths) if paths is not None else None

        self.stats = SchedulerStats()
        self._task: Optional[asyncio.Task] = None
        self._pass_in_flight = False

    @classmethod
    def from_config(
        cls, store: RecordStore, config: BitProfileConfig, **kwargs
    ) -> "ConsolidationScheduler":
        return cls(
            store,
            min_interval=config.consolidation_min_interval,
            max_interval=config.consolidation_max_interval,
            **kwargs,
        )

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _clamp(self, interval: float) -> float:
        return min(max(interval, self.min_interval), self.max_interval)

    def next_interval(self, report: ConsolidationReport) -> float:
        """Interval to wait after a pass that produced `report`."""
        heavy = (
            report.entries_read > HEAVY_ENTRY_COUNT
            or report.duration_seconds > HEAVY_DURATION_SECONDS
        )
        factor = GROWTH_FACTOR if heavy else SHRINK_FACTOR
        return self._clamp(self.interval * factor)

    async def run_once(self) -> Optional[ConsolidationReport]:
        """
        Run one consolidation pass now.

        Returns:
            The pass report, or None if the pass was skipped or failed
        """
        if self._pass_in_flight:
            self.stats.passes_skipped += 1
            logger.debug("Consolidation pass already running, skipping")
            return None

        self._pass_in_flight = True
        try:
            report = await self.store.consolidate(self.paths)
        except Exception as e:
            self.stats.passes_failed += 1
            self.stats.last_error = str(e)
            logger.error(f"Consolidation pass failed: {e}", exc_info=True)
            return None
        finally:
            self._pass_in_flight = False
            self.stats.last_run_at = datetime.now(timezone.utc)

        previous = self.interval
        self.interval = self.next_interval(report)
        self.stats.passes_completed += 1
        self.stats.last_report = report

        logger.debug(
            f"Consolidation interval {previous:.1f}s -> {self.interval:.1f}s",
            extra={"extra_fields": {"entries_read": report.entries_read}},
        )
        return report

    async def _run_loop(self) -> None:
        logger.info(f"Consolidation scheduler started (interval {self.interval:.1f}s)")
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()

    def start(self) -> None:
        """Start the background loop. Calling start() twice is a no-op."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
        logger.info("Consolidation scheduler stopped")

    async def __aenter__(self) -> "ConsolidationScheduler":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
