# -*- coding: utf-8 -*-
"""Logging setup (structlog + Logfire)."""

from collection_sale_tracker.logging.config import configure_logging

__all__ = ["configure_logging"]
