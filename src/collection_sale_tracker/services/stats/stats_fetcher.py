"""Stats fetcher: current aggregate stats for one collection, plus its metadata cache."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars

from collection_sale_tracker.exceptions import (
    CollectionNotFoundError,
    FetchError,
    MarketplaceAPIError,
)
from collection_sale_tracker.models.collection import CollectionMetadata
from collection_sale_tracker.models.stats_snapshot import StatsSnapshot
from collection_sale_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from collection_sale_tracker.clients.collection_metadata_cache import CollectionMetadataCache
    from collection_sale_tracker.clients.magic_eden import CollectionSchema, MagicEdenApiClient

_PERIOD = "1day"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _to_decimal(value: Any) -> Decimal | None:
    """Parse an API number into Decimal. None for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        return 0


def _period_value(raw: Any) -> Any:
    if isinstance(raw, dict):
        return raw.get(_PERIOD)
    return None


def parse_snapshot(collection: CollectionSchema, observed_at: datetime) -> StatsSnapshot:
    """Build a StatsSnapshot from a collections/v7 item.

    Missing volume and sales count read as 0; a missing floor stays None.
    """
    return StatsSnapshot(
        volume=_to_decimal(_period_value(collection.get("volume"))) or Decimal("0"),
        floor_price=_to_decimal(_period_value(collection.get("floorSale"))),
        sales_count=_to_int(collection.get("salesCount")),
        observed_at=observed_at,
    )


def parse_metadata(
    address: str, collection: CollectionSchema, fetched_at: datetime
) -> CollectionMetadata:
    """Build CollectionMetadata from a collections/v7 item (placeholder name if unnamed)."""
    name = collection.get("name")
    if not isinstance(name, str) or not name.strip():
        name = CollectionMetadata.placeholder(address).name
    return CollectionMetadata(
        address=address,
        name=name.strip(),
        image=collection.get("image") or None,
        description=collection.get("description") or None,
        symbol=collection.get("symbol") or None,
        floor_price=_to_decimal(_period_value(collection.get("floorSale"))),
        fetched_at=fetched_at,
    )


class StatsFetcher:
    """Fetches aggregate stats per collection; owns the cross-call metadata cache.

    Retries and backoff live in the HTTP client; this layer turns its outcome
    into a StatsSnapshot, FetchError or CollectionNotFoundError. It never
    touches the snapshot or dedup stores.
    """

    def __init__(
        self,
        api_client: MagicEdenApiClient,
        metadata_cache: CollectionMetadataCache,
        *,
        clock: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            api_client: Magic Eden API client (injected).
            metadata_cache: Metadata cache shared with notification rendering (injected).
            clock: Returns the observation time (aware UTC, injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._api = api_client
        self._metadata = metadata_cache
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def metadata_cache(self) -> CollectionMetadataCache:
        return self._metadata

    async def fetch(self, address: str) -> StatsSnapshot:
        """Fetch current stats for a collection.

        Caches the collection's metadata when it is missing or still a placeholder.

        Args:
            address: Collection address.

        Returns:
            A fresh StatsSnapshot stamped with the observation time.

        Raises:
            FetchError: Transport, timeout or non-2xx failure after all attempts.
            CollectionNotFoundError: The marketplace has no record of the collection.
        """
        address = address.strip()
        with bound_contextvars(stats_collection=mask_address(address)):
            collection = await self._get_collection(address)
            observed_at = self._clock()
            snapshot = parse_snapshot(collection, observed_at)
            if self._metadata.needs_refresh(address):
                self._metadata.remember(parse_metadata(address, collection, observed_at))
            self._logger.debug(
                "stats_fetched",
                stats_volume=str(snapshot.volume),
                stats_floor_price=str(snapshot.floor_price) if snapshot.floor_price is not None else None,
                stats_sales_count=snapshot.sales_count,
            )
            return snapshot

    def needs_metadata_refresh(self, address: str) -> bool:
        """True when metadata is missing or still the address-derived placeholder."""
        return self._metadata.needs_refresh(address)

    async def refresh_metadata(self, address: str) -> CollectionMetadata:
        """Force a metadata re-fetch and store it in the cache.

        Raises:
            FetchError: If the request fails after all attempts.
            CollectionNotFoundError: The marketplace has no record of the collection.
        """
        address = address.strip()
        with bound_contextvars(stats_collection=mask_address(address)):
            collection = await self._get_collection(address)
            metadata = parse_metadata(address, collection, self._clock())
            self._metadata.store(metadata)
            self._logger.info(
                "metadata_refreshed",
                metadata_name=metadata.name,
                metadata_placeholder=metadata.is_placeholder,
            )
            stored = self._metadata.get(address)
            return stored if stored is not None else metadata

    async def refresh_missing_metadata(self, addresses: Iterable[str]) -> list[str]:
        """Refresh metadata for addresses that need it; failures are logged and skipped.

        Returns:
            Addresses whose metadata was refreshed.
        """
        refreshed: list[str] = []
        for address in addresses:
            if not self.needs_metadata_refresh(address):
                continue
            try:
                await self.refresh_metadata(address)
            except CollectionNotFoundError:
                self._metadata.remember(CollectionMetadata.placeholder(address.strip()))
                self._logger.info(
                    "metadata_refresh_not_found",
                    metadata_collection=mask_address(address),
                )
                continue
            except FetchError as e:
                self._logger.warning(
                    "metadata_refresh_failed",
                    metadata_collection=mask_address(address),
                    error_type=type(e.cause).__name__ if e.cause else None,
                    error_message=str(e.cause) if e.cause else None,
                )
                continue
            refreshed.append(address.strip())
        return refreshed

    async def _get_collection(self, address: str) -> CollectionSchema:
        try:
            collection = await self._api.get_collection(address)
        except MarketplaceAPIError as e:
            self._logger.warning(
                "stats_fetch_failed",
                stats_attempts=e.attempts,
                http_status_code=e.status_code,
                error_type=type(e.cause or e).__name__,
                error_message=str(e.cause or e),
            )
            raise FetchError(address, cause=e.cause or e, attempts=e.attempts) from e
        if collection is None:
            self._logger.info("stats_collection_not_found")
            raise CollectionNotFoundError(address)
        return collection
