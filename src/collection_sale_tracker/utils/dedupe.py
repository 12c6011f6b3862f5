"""Deduplication key for inferred sales."""

from __future__ import annotations

from datetime import UTC, datetime


def sale_key(collection_address: str, observed_at: datetime) -> str:
    """Return a stable key identifying the sale inferred from a snapshot.

    Derived only from the collection and the snapshot time, so re-running
    inference on the same snapshot pair yields the same key. Microsecond
    resolution keeps rapid successive polls apart. Naive datetimes are
    treated as UTC.
    """
    if observed_at.tzinfo is None:
        observed_at = observed_at.replace(tzinfo=UTC)
    delta = observed_at - datetime(1970, 1, 1, tzinfo=UTC)
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return f"synthetic:{collection_address.strip()}:{micros}"
