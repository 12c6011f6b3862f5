"""Custom exceptions for marketplace access, stats fetching and notification delivery."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collection_sale_tracker.models.sale_event import SyntheticSaleEvent


class SaleTrackerError(Exception):
    """Base exception for sale-tracker errors."""

    pass


class MissingRequiredConfigError(SaleTrackerError):
    """Raised when a required configuration value is missing."""

    pass


class MarketplaceAPIError(SaleTrackerError):
    """Raised when a marketplace API request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        attempts: int = 1,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.attempts = attempts
        self.cause = cause


class RateLimitError(MarketplaceAPIError):
    """Raised when the API keeps returning HTTP 429 (Too Many Requests)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        attempts: int = 1,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429, attempts=attempts)
        self.retry_after = retry_after


class FetchError(SaleTrackerError):
    """Stats for a collection could not be fetched (transport, timeout or non-2xx).

    The previous snapshot stays untouched; the next cycle retries from it.
    """

    def __init__(
        self,
        address: str,
        *,
        cause: Exception | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(f"Failed to fetch stats for {address} after {attempts} attempt(s): {cause}")
        self.address = address
        self.cause = cause
        self.attempts = attempts


class CollectionNotFoundError(SaleTrackerError):
    """The marketplace answered successfully but has no record of the collection."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Collection not found upstream: {address}")
        self.address = address


class DeliverySinkError(SaleTrackerError):
    """A notification sink failed to deliver an admitted sale event.

    Delivery failures never reverse dedup admission.
    """

    def __init__(
        self,
        message: str,
        *,
        subscriber_id: str | None = None,
        event: SyntheticSaleEvent | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.subscriber_id = subscriber_id
        self.event = event
        self.cause = cause
