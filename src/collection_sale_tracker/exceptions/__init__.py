"""Exceptions subpackage."""

from collection_sale_tracker.exceptions.exceptions import (
    CollectionNotFoundError,
    DeliverySinkError,
    FetchError,
    MarketplaceAPIError,
    MissingRequiredConfigError,
    RateLimitError,
    SaleTrackerError,
)

__all__ = [
    "CollectionNotFoundError",
    "DeliverySinkError",
    "FetchError",
    "MarketplaceAPIError",
    "MissingRequiredConfigError",
    "RateLimitError",
    "SaleTrackerError",
]
