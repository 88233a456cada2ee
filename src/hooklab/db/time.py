# src/hooklab/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def from_unix(timestamp: int) -> datetime | None:
    """Convert a unix timestamp to an aware datetime; 0 means "unset"."""
    if timestamp <= 0:
        return None
    return datetime.fromtimestamp(timestamp, UTC)
