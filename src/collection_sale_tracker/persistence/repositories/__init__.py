# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from collection_sale_tracker.persistence.repositories.interfaces import (
    ISeenSaleRepository,
    ISnapshotRepository,
    ITrackedCollectionRepository,
)
from collection_sale_tracker.persistence.repositories.in_memory import (
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
