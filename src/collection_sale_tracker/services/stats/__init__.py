"""Collection stats fetching."""

from collection_sale_tracker.services.stats.stats_fetcher import (
    StatsFetcher,
    parse_metadata,
    parse_snapshot,
)

__all__ = ["StatsFetcher", "parse_metadata", "parse_snapshot"]
