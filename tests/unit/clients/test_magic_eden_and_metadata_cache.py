# -*- coding: utf-8 -*-
"""Unit tests for MagicEdenApiClient and CollectionMetadataCache."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from collection_sale_tracker.clients.collection_metadata_cache import CollectionMetadataCache
from collection_sale_tracker.clients.magic_eden import MagicEdenApiClient
from collection_sale_tracker.exceptions import MarketplaceAPIError
from collection_sale_tracker.models.collection import CollectionMetadata


def _settings() -> Any:
    return SimpleNamespace(
        api=SimpleNamespace(magic_eden_host="https://api.test/", chain="monad-testnet")
    )


async def test_get_collection_requests_collections_endpoint() -> None:
    http = SimpleNamespace(get=AsyncMock(return_value={"collections": [{"id": "0xabc", "name": "A"}]}))
    client = MagicEdenApiClient(http, _settings())  # type: ignore[arg-type]

    collection = await client.get_collection("0xabc")

    assert collection == {"id": "0xabc", "name": "A"}
    http.get.assert_awaited_once_with(
        "https://api.test/v3/rtp/monad-testnet/collections/v7",
        params={"id": "0xabc"},
    )


async def test_get_collection_returns_none_for_empty_collections() -> None:
    http = SimpleNamespace(get=AsyncMock(return_value={"collections": []}))
    client = MagicEdenApiClient(http, _settings())  # type: ignore[arg-type]

    assert await client.get_collection("0xabc") is None


@pytest.mark.parametrize(
    "body",
    [["unexpected"], {}, {"collections": None}, {"collections": "0xabc"}, None],
)
async def test_get_collection_raises_api_error_for_malformed_body(body: Any) -> None:
    http = SimpleNamespace(get=AsyncMock(return_value=body))
    client = MagicEdenApiClient(http, _settings())  # type: ignore[arg-type]

    with pytest.raises(MarketplaceAPIError) as exc_info:
        await client.get_collection("0xabc")

    assert exc_info.value.url == "https://api.test/v3/rtp/monad-testnet/collections/v7"


def test_remember_does_not_overwrite_real_metadata() -> None:
    cache = CollectionMetadataCache()
    assert cache.remember(CollectionMetadata.placeholder("0xabcdef123456"))
    assert cache.needs_refresh("0xabcdef123456")

    assert cache.remember(CollectionMetadata(address="0xabcdef123456", name="Real"))
    assert not cache.remember(CollectionMetadata(address="0xabcdef123456", name="Other"))

    assert cache.display_name("0xabcdef123456") == "Real"
    assert not cache.needs_refresh("0xabcdef123456")


def test_store_merges_missing_fields() -> None:
    cache = CollectionMetadataCache()
    cache.remember(CollectionMetadata(address="0xabc", name="Real", image="https://img"))

    cache.store(CollectionMetadata(address="0xabc", name="Renamed"))

    stored = cache.get("0xabc")
    assert stored is not None
    assert stored.name == "Renamed"
    assert stored.image == "https://img"


def test_cache_is_bounded_lru() -> None:
    cache = CollectionMetadataCache(maxsize=2)
    cache.remember(CollectionMetadata(address="a", name="A"))
    cache.remember(CollectionMetadata(address="b", name="B"))
    cache.get("a")
    cache.remember(CollectionMetadata(address="c", name="C"))

    assert len(cache) == 2
    assert "a" in cache
    assert "b" not in cache


def test_display_name_falls_back_to_placeholder() -> None:
    cache = CollectionMetadataCache()
    assert cache.display_name("0x5f8f2a0c1d3b4e5f60718293a4b5c6d7e8f91ff0") == "Collection 0x5f8f...1ff0"
