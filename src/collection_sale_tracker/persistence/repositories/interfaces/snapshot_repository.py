"""Abstract interface for last-observed stats snapshots."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from collection_sale_tracker.models.stats_snapshot import StatsSnapshot


class ISnapshotRepository(ABC):
    """Interface for the last stats snapshot per collection (one entry per collection)."""

    @abstractmethod
    async def get(self, collection_address: str) -> Optional[StatsSnapshot]:
        """Return the stored snapshot, or None if the collection was never observed."""
        ...

    @abstractmethod
    async def put(self, collection_address: str, snapshot: StatsSnapshot) -> None:
        """Replace the stored snapshot unconditionally."""
        ...

    @abstractmethod
    async def remove(self, collection_address: str) -> None:
        """Forget a collection (e.g. after it is no longer tracked)."""
        ...

    @abstractmethod
    async def addresses(self) -> list[str]:
        """Return every collection with a stored snapshot."""
        ...
