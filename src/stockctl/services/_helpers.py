"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def ns_to_iso(value: int | None) -> str | None:
    """Render a nanosecond record timestamp as ISO 8601, or None."""
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1_000_000_000, UTC).isoformat()
