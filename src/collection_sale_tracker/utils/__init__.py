# -*- coding: utf-8 -*-
"""Utility modules."""

from collection_sale_tracker.utils.dedupe import sale_key
from collection_sale_tracker.utils.validation import (
    ExtractedAddress,
    extract_collection_address,
    is_hex_address,
    mask_address,
    normalize_collection_address,
)

__all__ = [
    "ExtractedAddress",
    "extract_collection_address",
    "is_hex_address",
    "mask_address",
    "normalize_collection_address",
    "sale_key",
]
