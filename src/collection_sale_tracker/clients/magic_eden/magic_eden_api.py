# -*- coding: utf-8 -*-
"""Magic Eden RTP API client (collection stats and metadata)."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, cast
from structlog.contextvars import bound_contextvars

from collection_sale_tracker.clients.magic_eden.schema import CollectionSchema
from collection_sale_tracker.config import Settings
from collection_sale_tracker.exceptions import MarketplaceAPIError
from collection_sale_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from collection_sale_tracker.clients.http import AsyncHttpClient


class MagicEdenApiClient:
    """Client for Magic Eden RTP API (e.g. /collections/v7)."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.api.magic_eden_host, settings.api.chain).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        host = self._settings.api.magic_eden_host.rstrip("/")
        return f"{host}/v3/rtp/{self._settings.api.chain}"

    async def get_collection(self, address: str) -> Optional[CollectionSchema]:
        """Fetch one collection (stats + metadata) by contract address or id.

        Args:
            address: Collection contract address or marketplace collection id.

        Returns:
            The first matching collection, or None when the response has none.

        Raises:
            MarketplaceAPIError: If the request fails after all retries or the body is malformed.
        """
        with bound_contextvars(magic_eden_collection=mask_address(address)):
            url = f"{self._base_url()}/collections/v7"
            params: Dict[str, Any] = {"id": address}
            data = await self._http.get(url, params=params)
            collections = self.__collections(url, data)
            if not collections:
                self._logger.debug("magic_eden_collection_empty")
                return None
            return collections[0]

    def __collections(self, url: str, data: Any) -> List[CollectionSchema]:
        """Items of the `collections` array; an empty array means not found.

        Raises:
            MarketplaceAPIError: If the body is not an object with a `collections` list.
        """
        if not isinstance(data, dict):
            self._logger.warning(
                "magic_eden_collections_non_dict",
                magic_eden_response_type=type(data).__name__,
            )
            raise MarketplaceAPIError(
                f"Malformed collections response: expected object, got {type(data).__name__}",
                url=url,
            )
        raw = cast(Dict[str, Any], data).get("collections")
        if not isinstance(raw, list):
            self._logger.warning(
                "magic_eden_collections_missing",
                magic_eden_collections_type=type(raw).__name__,
            )
            raise MarketplaceAPIError(
                "Malformed collections response: missing 'collections' list",
                url=url,
            )
        result: List[CollectionSchema] = []
        for x in cast(List[Any], raw):
            if isinstance(x, dict):
                result.append(cast(CollectionSchema, x))
        return result
