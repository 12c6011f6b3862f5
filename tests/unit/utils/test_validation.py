# -*- coding: utf-8 -*-
"""Unit tests for address validation and extraction helpers."""

from __future__ import annotations

import pytest

from collection_sale_tracker.utils.validation import (
    extract_collection_address,
    is_hex_address,
    mask_address,
    normalize_collection_address,
)

ADDRESS = "0x5f8f2a0c1d3b4e5f60718293a4b5c6d7e8f91ff0"


def test_is_hex_address_accepts_42_char_hex() -> None:
    assert is_hex_address(ADDRESS)


@pytest.mark.parametrize(
    "value",
    [None, 42, "", "0x123", ADDRESS[2:] + "00", "0x" + "g" * 40],
)
def test_is_hex_address_rejects_invalid_values(value: object) -> None:
    assert not is_hex_address(value)


def test_extract_from_marketplace_url() -> None:
    url = f"https://magiceden.io/collections/monad-testnet/{ADDRESS}?tab=items"
    extracted = extract_collection_address(url)

    assert extracted is not None
    assert extracted.address == ADDRESS
    assert extracted.source == "Magic Eden"
    assert extracted.url == url


def test_extract_contract_address_strips_quotes_and_spaces() -> None:
    extracted = extract_collection_address(f'  "{ADDRESS}" ')

    assert extracted is not None
    assert extracted.address == ADDRESS
    assert extracted.source == "Contract Address"
    assert extracted.url is None


def test_extract_bare_collection_id() -> None:
    extracted = extract_collection_address("my-collection")

    assert extracted is not None
    assert extracted.address == "my-collection"
    assert extracted.source == "Direct Collection ID"


def test_extract_lower_cases_mixed_case_contract_address() -> None:
    url = f"https://magiceden.io/collections/monad-testnet/{ADDRESS.upper().replace('0X', '0x')}"

    from_url = extract_collection_address(url)
    from_address = extract_collection_address(ADDRESS.upper())

    assert from_url is not None and from_url.address == ADDRESS
    assert from_address is not None and from_address.address == ADDRESS
    assert from_address.source == "Contract Address"


def test_normalize_keeps_collection_ids_as_given() -> None:
    assert normalize_collection_address("  My-Collection ") == "My-Collection"
    assert normalize_collection_address("0xNotHex") == "0xNotHex"


@pytest.mark.parametrize("value", [None, "", "   ", "''"])
def test_extract_returns_none_for_empty_input(value: str | None) -> None:
    assert extract_collection_address(value) is None


def test_mask_address_shortens_long_values() -> None:
    assert mask_address(ADDRESS) == "0x5f8f...1ff0"


def test_mask_address_keeps_short_values_and_masks_empty() -> None:
    assert mask_address("0x1234") == "0x1234"
    assert mask_address(None) == "***"
