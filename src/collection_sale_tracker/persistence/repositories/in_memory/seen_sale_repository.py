# -*- coding: utf-8 -*-
"""In-memory sale dedup cache: per-collection FIFO with a retention horizon."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog

from collection_sale_tracker.models.seen_sale import SeenSale
from collection_sale_tracker.persistence.repositories.interfaces.seen_sale_repository import (
    ISeenSaleRepository,
)
from collection_sale_tracker.utils.validation import mask_address


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InMemorySeenSaleRepository(ISeenSaleRepository):
    """In-memory implementation of ISeenSaleRepository.

    collection_address -> {sale_id: SeenSale} in insertion order. Overflowing
    the per-collection capacity evicts the oldest entry (FIFO; lookups do not
    refresh recency). Volatile: a restart starts empty.
    """

    def __init__(
        self,
        *,
        capacity: int = 50,
        retention: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            capacity: Maximum entries kept per collection.
            retention: Entries older than this are removed by purge_expired().
            clock: Returns the current aware UTC time (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._retention = retention
        self._clock = clock
        self._store: dict[str, dict[str, SeenSale]] = {}
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def retention(self) -> timedelta:
        return self._retention

    async def has_seen(self, collection_address: str, sale_id: str) -> bool:
        """Return True if (collection_address, sale_id) has been admitted."""
        bucket = self._store.get(collection_address.strip())
        return bucket is not None and sale_id.strip() in bucket

    async def mark_seen(self, collection_address: str, sale_id: str) -> bool:
        """Admit a sale id. Idempotent; first_seen_at is never refreshed."""
        entry = SeenSale.create(collection_address, sale_id, first_seen_at=self._clock())
        bucket = self._store.setdefault(entry.collection_address, {})
        if entry.sale_id in bucket:
            return False
        bucket[entry.sale_id] = entry
        while len(bucket) > self._capacity:
            oldest_id = next(iter(bucket))
            evicted = bucket.pop(oldest_id)
            self._logger.debug(
                "seen_sale_evicted",
                seen_sale_collection=mask_address(evicted.collection_address),
                seen_sale_id=evicted.sale_id,
                seen_sale_reason="capacity",
            )
        return True

    async def purge_expired(self) -> int:
        """Drop entries whose first_seen_at is older than the retention horizon."""
        cutoff = self._clock() - self._retention
        removed = 0
        for address in list(self._store):
            bucket = self._store[address]
            expired = [sid for sid, entry in bucket.items() if entry.first_seen_at < cutoff]
            for sid in expired:
                del bucket[sid]
            removed += len(expired)
            if not bucket:
                del self._store[address]
        if removed:
            self._logger.debug("seen_sale_purged", seen_sale_purged_count=removed)
        return removed

    async def entries(self, collection_address: str) -> list[SeenSale]:
        """Return entries for a collection, oldest first."""
        return list(self._store.get(collection_address.strip(), {}).values())

    async def count(self, collection_address: str) -> int:
        return len(self._store.get(collection_address.strip(), {}))

    async def clear(self) -> None:
        self._store.clear()
