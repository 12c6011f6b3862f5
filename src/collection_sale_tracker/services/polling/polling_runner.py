# -*- coding: utf-8 -*-
"""Orchestrator: runs poll cycles every poll_seconds until shutdown (signal or CancelledError)."""

from __future__ import annotations

import asyncio
import structlog
from typing import Any, Callable, Optional

from collection_sale_tracker.config import Settings
from collection_sale_tracker.models.cycle_report import CycleReport
from collection_sale_tracker.persistence.repositories.interfaces import (
    ITrackedCollectionRepository,
)
from collection_sale_tracker.services.polling.poll_cycle import PollCycleCoordinator
from collection_sale_tracker.services.stats import StatsFetcher


class PollingRunner:
    """External timer for PollCycleCoordinator: one cycle at start, then one per interval."""

    def __init__(
        self,
        coordinator: PollCycleCoordinator,
        stats_fetcher: StatsFetcher,
        tracked_collection_repository: ITrackedCollectionRepository,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            coordinator: Injected PollCycleCoordinator.
            stats_fetcher: Used for the metadata refresh pass before each cycle.
            tracked_collection_repository: Registry the tracked set is read from.
            settings: Application settings (uses settings.tracking.poll_seconds).
        """
        self._coordinator = coordinator
        self._stats = stats_fetcher
        self._registry = tracked_collection_repository
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def tick(self) -> CycleReport:
        """Refresh placeholder metadata, then run one cycle over every tracked collection."""
        tracked = sorted(await self._registry.all_tracked())
        if tracked:
            await self._stats.refresh_missing_metadata(tracked)
        return await self._coordinator.run_cycle(tracked)

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Run cycles until shutdown_event is set or the task is cancelled.

        The first cycle runs immediately. The interval is measured from the end
        of one cycle to the start of the next, so cycles never overlap here.

        Args:
            shutdown_event: When set, stop after the current cycle and return.
        """
        poll_seconds = self._settings.tracking.poll_seconds
        self._logger.info(
            "polling_runner_started",
            tracking_poll_seconds=poll_seconds,
            tracking_cold_start_mode=self._settings.tracking.cold_start_mode,
        )
        try:
            while not shutdown_event.is_set():
                report = await self.tick()
                if not report.ok:
                    self._logger.warning(
                        "polling_cycle_degraded",
                        poll_errors=len(report.errors),
                        poll_delivery_errors=len(report.delivery_errors),
                        poll_skipped_overlap=report.skipped_overlap,
                    )
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=poll_seconds)
                except asyncio.TimeoutError:
                    continue
        except asyncio.CancelledError:
            self._logger.info(
                "polling_runner_shutdown_cancelled",
                message="Kernel or task cancelled; stopping system",
            )
            raise

        self._logger.info("polling_runner_shutdown_complete")
