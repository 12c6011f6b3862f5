# -*- coding: utf-8 -*-
"""Dependency injection."""

from collection_sale_tracker.DI.container import Container

__all__ = ["Container"]
