# -*- coding: utf-8 -*-
"""Unit tests for entry point helpers."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock

from collection_sale_tracker.main import seed_tracked_collections
from collection_sale_tracker.persistence.repositories.in_memory import (
    InMemoryTrackedCollectionRepository,
)

ADDRESS = "0x5f8f2a0c1d3b4e5f60718293a4b5c6d7e8f91ff0"


def _settings(*targets: str) -> Any:
    return SimpleNamespace(
        tracking=SimpleNamespace(subscriber_id="default", target_collections=list(targets))
    )


async def test_seed_registers_addresses_and_urls(
    tracked_repo: InMemoryTrackedCollectionRepository,
) -> None:
    logger = Mock()
    url = f"https://magiceden.io/collections/monad-testnet/{ADDRESS}"

    seeded = await seed_tracked_collections(
        _settings(url, f"'{ADDRESS}'", "bare-id"), tracked_repo, logger
    )

    assert seeded == [ADDRESS, "bare-id"]
    assert await tracked_repo.list_tracked("default") == {ADDRESS, "bare-id"}
    record = await tracked_repo.get("default", ADDRESS)
    assert record is not None
    assert record.source == "Magic Eden"
    assert record.url == url


async def test_seed_skips_unparseable_entries(
    tracked_repo: InMemoryTrackedCollectionRepository,
) -> None:
    logger = Mock()

    seeded = await seed_tracked_collections(_settings('""'), tracked_repo, logger)

    assert seeded == []
    logger.warning.assert_called_once()
