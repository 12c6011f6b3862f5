"""Abstract interface for the subscriber -> tracked collections registry."""

from __future__ import annotations

from abc import ABC, abstractmethod

from collection_sale_tracker.models.collection import TrackedCollection
from collection_sale_tracker.utils.validation import normalize_collection_address


class ITrackedCollectionRepository(ABC):
    """Interface for per-subscriber tracking sets. The poll cycle only reads it."""

    @abstractmethod
    async def list_tracked(self, subscriber_id: str) -> set[str]:
        """Return the collection addresses a subscriber tracks."""
        ...

    @abstractmethod
    async def list_subscribers(self) -> list[str]:
        """Return every subscriber with at least one tracked collection."""
        ...

    @abstractmethod
    async def track(self, collection: TrackedCollection) -> bool:
        """Start tracking. Returns False if the subscriber already tracks the address."""
        ...

    @abstractmethod
    async def untrack(self, subscriber_id: str, collection_address: str) -> bool:
        """Stop tracking. Returns False if it was not tracked."""
        ...

    @abstractmethod
    async def get(self, subscriber_id: str, collection_address: str) -> TrackedCollection | None:
        """Return the tracking record, or None."""
        ...

    async def subscribers_for(self, collection_address: str) -> list[str]:
        """Return subscribers tracking a collection. Default impl scans all subscribers."""
        address = normalize_collection_address(collection_address)
        return [
            subscriber_id
            for subscriber_id in await self.list_subscribers()
            if address in await self.list_tracked(subscriber_id)
        ]

    async def all_tracked(self) -> set[str]:
        """Union of every subscriber's tracking set."""
        result: set[str] = set()
        for subscriber_id in await self.list_subscribers():
            result |= await self.list_tracked(subscriber_id)
        return result
