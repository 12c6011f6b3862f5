# -*- coding: utf-8 -*-
"""Unit tests for InMemorySeenSaleRepository."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest

from collection_sale_tracker.persistence.repositories.in_memory import InMemorySeenSaleRepository


async def test_mark_seen_then_has_seen(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
) -> None:
    assert not await seen_sale_repo.has_seen(collection_address, "sale-1")

    assert await seen_sale_repo.mark_seen(collection_address, "sale-1") is True

    assert await seen_sale_repo.has_seen(collection_address, "sale-1")


async def test_mark_seen_is_idempotent_and_keeps_first_seen_at(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
    clock: Any,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "sale-1")
    first = (await seen_sale_repo.entries(collection_address))[0].first_seen_at
    clock.advance(minutes=5)

    assert await seen_sale_repo.mark_seen(collection_address, "sale-1") is False

    entries = await seen_sale_repo.entries(collection_address)
    assert len(entries) == 1
    assert entries[0].first_seen_at == first


async def test_sale_ids_are_scoped_per_collection(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "sale-1")

    assert not await seen_sale_repo.has_seen("0xother", "sale-1")


async def test_capacity_evicts_oldest_first(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
    clock: Any,
) -> None:
    for i in range(60):
        await seen_sale_repo.mark_seen(collection_address, f"sale-{i}")
        clock.advance(seconds=1)

    assert await seen_sale_repo.count(collection_address) == 50
    for i in range(10):
        assert not await seen_sale_repo.has_seen(collection_address, f"sale-{i}")
    for i in range(10, 60):
        assert await seen_sale_repo.has_seen(collection_address, f"sale-{i}")
    entries = await seen_sale_repo.entries(collection_address)
    assert entries[0].sale_id == "sale-10"
    assert entries[-1].sale_id == "sale-59"


async def test_lookup_does_not_refresh_eviction_order(
    clock: Any,
    collection_address: str,
) -> None:
    repo = InMemorySeenSaleRepository(capacity=2, clock=clock)
    await repo.mark_seen(collection_address, "a")
    await repo.mark_seen(collection_address, "b")
    assert await repo.has_seen(collection_address, "a")

    await repo.mark_seen(collection_address, "c")

    assert not await repo.has_seen(collection_address, "a")
    assert await repo.has_seen(collection_address, "b")


async def test_purge_expired_drops_entries_older_than_retention(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
    clock: Any,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "old")
    clock.advance(minutes=30)
    await seen_sale_repo.mark_seen(collection_address, "recent")
    clock.advance(minutes=31)

    removed = await seen_sale_repo.purge_expired()

    assert removed == 1
    assert not await seen_sale_repo.has_seen(collection_address, "old")
    assert await seen_sale_repo.has_seen(collection_address, "recent")


async def test_purge_keeps_entries_exactly_at_retention_horizon(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
    clock: Any,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "edge")
    clock.advance(hours=1)

    assert await seen_sale_repo.purge_expired() == 0
    assert await seen_sale_repo.has_seen(collection_address, "edge")


async def test_purge_removes_empty_collections(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
    clock: Any,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "sale-1")
    clock.advance(hours=2)

    await seen_sale_repo.purge_expired()

    assert await seen_sale_repo.count(collection_address) == 0
    assert await seen_sale_repo.entries(collection_address) == []


async def test_clear_forgets_everything(
    seen_sale_repo: InMemorySeenSaleRepository,
    collection_address: str,
) -> None:
    await seen_sale_repo.mark_seen(collection_address, "sale-1")

    await seen_sale_repo.clear()

    assert not await seen_sale_repo.has_seen(collection_address, "sale-1")


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InMemorySeenSaleRepository(capacity=0)


def test_exposes_capacity_and_retention() -> None:
    repo = InMemorySeenSaleRepository(capacity=7, retention=timedelta(minutes=3))
    assert repo.capacity == 7
    assert repo.retention == timedelta(minutes=3)
