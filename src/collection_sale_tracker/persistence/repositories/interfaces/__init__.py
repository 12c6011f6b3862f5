# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/."""

from collection_sale_tracker.persistence.repositories.interfaces.seen_sale_repository import (
    ISeenSaleRepository,
)
from collection_sale_tracker.persistence.repositories.interfaces.snapshot_repository import (
    ISnapshotRepository,
)
from collection_sale_tracker.persistence.repositories.interfaces.tracked_collection_repository import (
    ITrackedCollectionRepository,
)

__all__ = [
    "ISeenSaleRepository",
    "ISnapshotRepository",
    "ITrackedCollectionRepository",
]
