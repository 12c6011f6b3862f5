# -*- coding: utf-8 -*-
"""In-memory tracked collection registry (keyed by subscriber_id, address)."""

from __future__ import annotations

from collection_sale_tracker.models.collection import TrackedCollection
from collection_sale_tracker.persistence.repositories.interfaces.tracked_collection_repository import (
    ITrackedCollectionRepository,
)
from collection_sale_tracker.utils.validation import normalize_collection_address


class InMemoryTrackedCollectionRepository(ITrackedCollectionRepository):
    """In-memory implementation of ITrackedCollectionRepository."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._store: dict[str, dict[str, TrackedCollection]] = {}

    async def list_tracked(self, subscriber_id: str) -> set[str]:
        return set(self._store.get(subscriber_id.strip(), {}))

    async def list_subscribers(self) -> list[str]:
        return [sid for sid, tracked in self._store.items() if tracked]

    async def track(self, collection: TrackedCollection) -> bool:
        bucket = self._store.setdefault(collection.subscriber_id, {})
        if collection.address in bucket:
            return False
        bucket[collection.address] = collection
        return True

    async def untrack(self, subscriber_id: str, collection_address: str) -> bool:
        address = normalize_collection_address(collection_address)
        bucket = self._store.get(subscriber_id.strip())
        if not bucket or address not in bucket:
            return False
        del bucket[address]
        return True

    async def get(self, subscriber_id: str, collection_address: str) -> TrackedCollection | None:
        bucket = self._store.get(subscriber_id.strip(), {})
        return bucket.get(normalize_collection_address(collection_address))
