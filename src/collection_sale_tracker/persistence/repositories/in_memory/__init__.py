"""In-memory repository implementations."""

from collection_sale_tracker.persistence.repositories.in_memory.seen_sale_repository import (
    InMemorySeenSaleRepository,
)
from collection_sale_tracker.persistence.repositories.in_memory.snapshot_repository import (
    InMemorySnapshotRepository,
)
from collection_sale_tracker.persistence.repositories.in_memory.tracked_collection_repository import (
    InMemoryTrackedCollectionRepository,
)

__all__ = [
    "InMemorySeenSaleRepository",
    "InMemorySnapshotRepository",
    "InMemoryTrackedCollectionRepository",
]
