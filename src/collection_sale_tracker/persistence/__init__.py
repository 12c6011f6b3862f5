"""Persistence layer (repositories, etc.)."""

from collection_sale_tracker.persistence.repositories import (
    ISeenSaleRepository,
    ISnapshotRepository,
    ITrackedCollectionRepository,
    InMemorySeenSaleRepository,
    InMemorySnapshotRepository,
    InMemoryTrackedCollectionRepository,
)

__all__ = [
    "ISeenSaleRepository",
    "ISnapshotRepository",
    "ITrackedCollectionRepository",
    "InMemorySeenSaleRepository",
    "InMemorySnapshotRepository",
    "InMemoryTrackedCollectionRepository",
]
