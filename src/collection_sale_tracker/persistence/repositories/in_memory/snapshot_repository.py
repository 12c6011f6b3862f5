# -*- coding: utf-8 -*-
"""In-memory snapshot repository (keyed by collection address)."""

from __future__ import annotations

from typing import Mapping, Optional

from collection_sale_tracker.models.stats_snapshot import StatsSnapshot
from collection_sale_tracker.persistence.repositories.interfaces.snapshot_repository import (
    ISnapshotRepository,
)


class InMemorySnapshotRepository(ISnapshotRepository):
    """In-memory implementation of ISnapshotRepository. No eviction: one entry per collection."""

    def __init__(self, initial: Optional[Mapping[str, StatsSnapshot]] = None) -> None:
        """Initialize the store, optionally seeded with known snapshots."""
        self._store: dict[str, StatsSnapshot] = {
            address.strip(): snapshot for address, snapshot in (initial or {}).items()
        }

    async def get(self, collection_address: str) -> Optional[StatsSnapshot]:
        return self._store.get(collection_address.strip())

    async def put(self, collection_address: str, snapshot: StatsSnapshot) -> None:
        self._store[collection_address.strip()] = snapshot

    async def remove(self, collection_address: str) -> None:
        self._store.pop(collection_address.strip(), None)

    async def addresses(self) -> list[str]:
        return list(self._store)
