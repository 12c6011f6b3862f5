# -*- coding: utf-8 -*-
"""Unit tests for PollingRunner."""

from __future__ import annotations

import asyncio
from datetime import datetime
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

from collection_sale_tracker.models.collection import TrackedCollection
from collection_sale_tracker.models.cycle_report import CycleReport
from collection_sale_tracker.persistence.repositories.in_memory import (
    InMemoryTrackedCollectionRepository,
)
from collection_sale_tracker.services.polling import PollingRunner


def _settings(poll_seconds: float = 60.0) -> Any:
    return SimpleNamespace(
        tracking=SimpleNamespace(poll_seconds=poll_seconds, cold_start_mode="catch_up")
    )


async def test_tick_refreshes_metadata_then_runs_cycle_over_tracked_set(
    tracked_repo: InMemoryTrackedCollectionRepository,
    now_utc: datetime,
) -> None:
    await tracked_repo.track(TrackedCollection.create("0xb", "alice"))
    await tracked_repo.track(TrackedCollection.create("0xa", "bob"))
    report = CycleReport(started_at=now_utc)
    coordinator = SimpleNamespace(run_cycle=AsyncMock(return_value=report))
    stats = SimpleNamespace(refresh_missing_metadata=AsyncMock(return_value=[]))
    runner = PollingRunner(coordinator, stats, tracked_repo, _settings())  # type: ignore[arg-type]

    assert await runner.tick() is report

    stats.refresh_missing_metadata.assert_awaited_once_with(["0xa", "0xb"])
    coordinator.run_cycle.assert_awaited_once_with(["0xa", "0xb"])


async def test_run_polls_immediately_and_stops_on_shutdown(
    tracked_repo: InMemoryTrackedCollectionRepository,
    now_utc: datetime,
) -> None:
    shutdown = asyncio.Event()
    cycles: list[int] = []

    async def _run_cycle(collections: Any) -> CycleReport:
        cycles.append(len(cycles))
        if len(cycles) == 3:
            shutdown.set()
        return CycleReport(started_at=now_utc)

    coordinator = SimpleNamespace(run_cycle=_run_cycle)
    stats = SimpleNamespace(refresh_missing_metadata=AsyncMock(return_value=[]))
    runner = PollingRunner(coordinator, stats, tracked_repo, _settings(poll_seconds=0.001))  # type: ignore[arg-type]

    await asyncio.wait_for(runner.run(shutdown), timeout=5)

    assert cycles == [0, 1, 2]


async def test_run_returns_without_cycles_when_already_shut_down(
    tracked_repo: InMemoryTrackedCollectionRepository,
) -> None:
    shutdown = asyncio.Event()
    shutdown.set()
    coordinator = SimpleNamespace(run_cycle=AsyncMock())
    stats = SimpleNamespace(refresh_missing_metadata=AsyncMock())
    runner = PollingRunner(coordinator, stats, tracked_repo, _settings())  # type: ignore[arg-type]

    await runner.run(shutdown)

    coordinator.run_cycle.assert_not_awaited()
