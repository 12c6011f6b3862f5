"""SeenSale: dedup cache entry for a sale that was already admitted.

Identity is (collection_address, sale_id). sale_id comes from
utils.dedupe.sale_key() (e.g. synthetic:0x...:1760000000000000).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class SeenSale:
    """Record that a sale has been admitted (for deduplication).

    Identity: (collection_address, sale_id). first_seen_at drives both
    FIFO eviction and the retention purge; it is never refreshed.
    """

    collection_address: str
    """Tracked collection address."""
    sale_id: str
    """Stable key from utils.dedupe.sale_key()."""
    first_seen_at: datetime
    """When the sale was first admitted."""

    @classmethod
    def create(
        cls,
        collection_address: str,
        sale_id: str,
        *,
        first_seen_at: datetime | None = None,
    ) -> SeenSale:
        """Create a new SeenSale record."""
        collection_address = collection_address.strip()
        sale_id = sale_id.strip()
        if not collection_address or not sale_id:
            raise ValueError("collection_address and sale_id must be non-empty")
        return cls(
            collection_address=collection_address,
            sale_id=sale_id,
            first_seen_at=first_seen_at or datetime.now(UTC),
        )
