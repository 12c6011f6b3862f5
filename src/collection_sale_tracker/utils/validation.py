"""Validation helpers for collection addresses and marketplace URLs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_MARKETPLACE_URL_RE = re.compile(r"magiceden\.io/collections/[^/\s]+/([^/\s?#]+)")
_QUOTES = "\"'"


@dataclass(frozen=True)
class ExtractedAddress:
    """Collection address parsed from user input."""

    address: str
    source: str
    """One of: Magic Eden, Contract Address, Direct Collection ID."""
    url: str | None = None


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x contract address (42 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if len(s) != 42:
        return False
    if not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def normalize_collection_address(addr: str) -> str:
    """Strip whitespace and lower-case 0x contract addresses; other ids are kept as given."""
    s = addr.strip()
    if is_hex_address(s.lower()):
        return s.lower()
    return s


def extract_collection_address(raw: str | None) -> ExtractedAddress | None:
    """Parse a marketplace URL, 0x contract address or bare collection id.

    Surrounding whitespace and one layer of quotes are stripped. Returns None
    for empty input.
    """
    if not raw:
        return None
    cleaned = raw.strip()
    if cleaned[:1] in _QUOTES:
        cleaned = cleaned[1:]
    if cleaned[-1:] in _QUOTES:
        cleaned = cleaned[:-1]
    cleaned = cleaned.strip()
    if not cleaned:
        return None

    match = _MARKETPLACE_URL_RE.search(cleaned)
    if match:
        return ExtractedAddress(
            address=normalize_collection_address(match.group(1)), source="Magic Eden", url=cleaned
        )
    if cleaned[:2].lower() == "0x":
        return ExtractedAddress(address=normalize_collection_address(cleaned), source="Contract Address")
    return ExtractedAddress(address=cleaned, source="Direct Collection ID")


def mask_address(addr: str | None) -> str:
    """Return a masked address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return addr or "***"
    return f"{addr[:6]}...{addr[-4:]}"
