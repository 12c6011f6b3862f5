# -*- coding: utf-8 -*-
"""Unit tests for SaleInferenceEngine."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest

from collection_sale_tracker.models.collection import CollectionMetadata
from collection_sale_tracker.models.stats_snapshot import StatsSnapshot
from collection_sale_tracker.services.inference import SaleInferenceEngine, estimate_price
from collection_sale_tracker.utils.dedupe import sale_key


@pytest.fixture
def engine() -> SaleInferenceEngine:
    return SaleInferenceEngine()


def test_first_observation_is_baseline_only(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
) -> None:
    assert engine.infer(collection_address, None, snapshot_factory()) == []


def test_volume_increase_yields_one_event_priced_by_delta(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
    D: Callable[[Any], Decimal],
) -> None:
    previous = snapshot_factory(volume="100", sales_count=10)
    current = snapshot_factory(
        volume="101.5", sales_count=11, observed_at=now_utc + timedelta(minutes=1)
    )

    events = engine.infer(collection_address, previous, current)

    assert len(events) == 1
    event = events[0]
    assert event.estimated_price == D("1.5")
    assert event.source_metrics.volume_delta == D("1.5")
    assert event.source_metrics.sales_count_delta == 1
    assert event.inferred_at == current.observed_at
    assert event.inferred_id == sale_key(collection_address, current.observed_at)


def test_count_increase_without_volume_falls_back_to_floor(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
    D: Callable[[Any], Decimal],
) -> None:
    previous = snapshot_factory(volume="100", sales_count=10)
    current = snapshot_factory(
        volume="100", sales_count=12, floor_price="0.8", observed_at=now_utc + timedelta(minutes=1)
    )

    [event] = engine.infer(collection_address, previous, current)

    assert event.estimated_price == D("0.8")
    assert event.source_metrics.sales_count_delta == 2


def test_price_unknown_when_no_volume_delta_and_no_floor(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
) -> None:
    previous = snapshot_factory(sales_count=10)
    current = snapshot_factory(
        sales_count=11, floor_price=None, observed_at=now_utc + timedelta(minutes=1)
    )

    [event] = engine.infer(collection_address, previous, current)

    assert event.estimated_price is None
    assert not event.price_known


@pytest.mark.parametrize(
    ("volume", "sales_count"),
    [("100", 10), ("99", 10), ("100", 9), ("90", 8)],
)
def test_no_event_without_positive_delta(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
    volume: str,
    sales_count: int,
) -> None:
    previous = snapshot_factory(volume="100", sales_count=10)
    current = snapshot_factory(
        volume=volume, sales_count=sales_count, observed_at=now_utc + timedelta(minutes=1)
    )

    assert engine.infer(collection_address, previous, current) == []


def test_several_sales_collapse_into_one_event(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
) -> None:
    previous = snapshot_factory(volume="100", sales_count=10)
    current = snapshot_factory(
        volume="105", sales_count=15, observed_at=now_utc + timedelta(minutes=1)
    )

    events = engine.infer(collection_address, previous, current)

    assert len(events) == 1
    assert events[0].source_metrics.sales_count_delta == 5


def test_inference_is_deterministic(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
) -> None:
    previous = snapshot_factory(volume="100")
    current = snapshot_factory(volume="102", observed_at=now_utc + timedelta(minutes=1))

    first = engine.infer(collection_address, previous, current)
    second = engine.infer(collection_address, previous, current)

    assert first == second


def test_metadata_name_and_image_are_attached(
    engine: SaleInferenceEngine,
    snapshot_factory: Callable[..., StatsSnapshot],
    collection_address: str,
    now_utc: datetime,
) -> None:
    metadata = CollectionMetadata(address=collection_address, name="Monkeys", image="https://img")
    previous = snapshot_factory(volume="100")
    current = snapshot_factory(volume="102", observed_at=now_utc + timedelta(minutes=1))

    [event] = engine.infer(collection_address, previous, current, metadata=metadata)

    assert event.collection_name == "Monkeys"
    assert event.collection_image == "https://img"


def test_estimate_price_rules(D: Callable[[Any], Decimal]) -> None:
    assert estimate_price(D("2"), D("0.5")) == D("2")
    assert estimate_price(D("0"), D("0.5")) == D("0.5")
    assert estimate_price(D("-1"), D("0.5")) == D("0.5")
    assert estimate_price(D("0"), D("0")) is None
    assert estimate_price(D("0"), None) is None
