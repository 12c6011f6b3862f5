# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from collection_sale_tracker.models.stats_snapshot import StatsSnapshot
from collection_sale_tracker.persistence.repositories.in_memory import (
    InMemorySeenSaleRepository,
    InMemorySnapshotRepository,
    InMemoryTrackedCollectionRepository,
)


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def collection_address() -> str:
    """Default tracked collection used by tests."""
    return "0x5f8f2a0c1d3b4e5f60718293a4b5c6d7e8f91ff0"


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def D() -> Callable[[Any], Decimal]:
    """Decimal helper: D('1.23') -> Decimal('1.23')."""
    return lambda value: Decimal(str(value))


@pytest.fixture
def clock(now_utc: datetime) -> FakeClock:
    """Fake clock starting at now_utc."""
    return FakeClock(now_utc)


@pytest.fixture
def snapshot_factory(
    now_utc: datetime,
    D: Callable[[Any], Decimal],
) -> Callable[..., StatsSnapshot]:
    """Build StatsSnapshot with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> StatsSnapshot:
        floor = overrides.pop("floor_price", "0.5")
        return StatsSnapshot(
            volume=D(overrides.pop("volume", "100")),
            floor_price=D(floor) if floor is not None else None,
            sales_count=overrides.pop("sales_count", 10),
            observed_at=overrides.pop("observed_at", now_utc),
        )

    return _build


@pytest.fixture
def seen_sale_repo(clock: FakeClock) -> InMemorySeenSaleRepository:
    """Fresh dedup cache (capacity 50, 1h retention) driven by the fake clock."""
    return InMemorySeenSaleRepository(capacity=50, retention=timedelta(hours=1), clock=clock)


@pytest.fixture
def snapshot_repo() -> InMemorySnapshotRepository:
    """Fresh in-memory snapshot repository per test."""
    return InMemorySnapshotRepository()


@pytest.fixture
def tracked_repo() -> InMemoryTrackedCollectionRepository:
    """Fresh in-memory subscriber registry per test."""
    return InMemoryTrackedCollectionRepository()

