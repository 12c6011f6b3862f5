# -*- coding: utf-8 -*-
"""In-memory cache of collection display metadata (address -> name, image, description)."""

from __future__ import annotations

import structlog
from typing import Any, Callable, Optional
from cachetools import LRUCache

from collection_sale_tracker.models.collection import CollectionMetadata
from collection_sale_tracker.utils.validation import mask_address


class CollectionMetadataCache:
    """Cache for address -> CollectionMetadata, shared across cycles.

    Entries are never invalidated by time; only an explicit store() replaces
    one. Uses cachetools.LRUCache so memory stays bounded; maxsize is expected
    to exceed the number of tracked collections.
    """

    def __init__(
        self,
        *,
        maxsize: int = 4096,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the cache.

        Args:
            maxsize: Maximum number of collections to keep (LRU eviction).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._cache: LRUCache[str, CollectionMetadata] = LRUCache(maxsize=max(1, maxsize))
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def __contains__(self, address: str) -> bool:
        return address.strip() in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, address: str) -> Optional[CollectionMetadata]:
        """Return cached metadata for an address, or None."""
        return self._cache.get(address.strip())

    def remember(self, metadata: CollectionMetadata) -> bool:
        """Cache metadata unless the address already has real (non-placeholder) metadata.

        Returns:
            True if the cache was updated.
        """
        key = metadata.address.strip()
        current = self._cache.get(key)
        if current is not None and not current.is_placeholder:
            return False
        self._cache[key] = metadata
        self._logger.debug(
            "metadata_cache_remembered",
            metadata_collection=mask_address(key),
            metadata_placeholder=metadata.is_placeholder,
        )
        return True

    def store(self, metadata: CollectionMetadata) -> None:
        """Replace cached metadata (explicit refresh), keeping fields the new value lacks."""
        key = metadata.address.strip()
        current = self._cache.get(key)
        self._cache[key] = current.merged_with(metadata) if current is not None else metadata
        self._logger.debug(
            "metadata_cache_stored",
            metadata_collection=mask_address(key),
        )

    def needs_refresh(self, address: str) -> bool:
        """True when metadata is missing or still the address-derived placeholder."""
        current = self._cache.get(address.strip())
        return current is None or current.is_placeholder

    def display_name(self, address: str) -> str:
        """Cached name, or the placeholder name when nothing is cached."""
        current = self._cache.get(address.strip())
        if current is None:
            return CollectionMetadata.placeholder(address.strip()).name
        return current.name
