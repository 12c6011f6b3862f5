"""Abstract interface for the sale deduplication cache."""

from __future__ import annotations

from abc import ABC, abstractmethod

from collection_sale_tracker.models.seen_sale import SeenSale


class ISeenSaleRepository(ABC):
    """Interface for remembering admitted sale ids per collection.

    Guarantee: once mark_seen(address, sale_id) returned, has_seen(address, sale_id)
    is True until the entry is evicted by capacity or purged by age.
    """

    @abstractmethod
    async def has_seen(self, collection_address: str, sale_id: str) -> bool:
        """Return True if (collection_address, sale_id) has been admitted."""
        ...

    @abstractmethod
    async def mark_seen(self, collection_address: str, sale_id: str) -> bool:
        """Admit a sale id. Idempotent; returns True only when newly admitted."""
        ...

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop entries older than the retention horizon. Returns the number removed."""
        ...

    @abstractmethod
    async def entries(self, collection_address: str) -> list[SeenSale]:
        """Return entries for a collection, oldest first."""
        ...

    async def count(self, collection_address: str) -> int:
        """Number of remembered sale ids for a collection."""
        return len(await self.entries(collection_address))

    @abstractmethod
    async def clear(self) -> None:
        """Forget everything."""
        ...
