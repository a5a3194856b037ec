"""Cache data models.

A ``CacheEntry`` is the on-disk envelope for one cache type::

    {"timestamp": 1760000000, "ttl_seconds": 3600, "data": ...}

The TTL travels with the entry, so an entry written by a store configured
with a different TTL still expires on its own schedule.  All time-dependent
helpers take ``now`` explicitly (defaulting to the wall clock) so callers
with an injected clock get consistent answers.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel, Field

from linear_cli.core.models.enums import CacheType

DEFAULT_TTL_SECONDS = 3600
"""One hour."""


def _now(now: float | None) -> int:
    return int(time.time() if now is None else now)


class CacheEntry(BaseModel):
    """Timestamped cache payload."""

    timestamp: int = Field(ge=0, description="Creation time, seconds since epoch")
    ttl_seconds: int = Field(ge=0, description="Validity window length")
    data: Any = None

    @property
    def expires_at(self) -> int:
        return self.timestamp + self.ttl_seconds

    def is_valid(self, now: float | None = None) -> bool:
        return _now(now) < self.expires_at

    def age_seconds(self, now: float | None = None) -> int:
        """Seconds since creation; 0 for timestamps in the future."""
        return max(0, _now(now) - self.timestamp)

    def remaining_ttl(self, now: float | None = None) -> int:
        """Seconds until expiry; 0 once expired."""
        return max(0, self.expires_at - _now(now))


class CacheStatus(BaseModel):
    """Read-only status view of one cache type.  Never persisted."""

    cache_type: CacheType
    valid: bool = False
    age_seconds: int | None = None
    size_bytes: int | None = None
    item_count: int | None = None

    @property
    def age_display(self) -> str:
        return format_age(self.age_seconds)

    @property
    def size_display(self) -> str:
        return format_size(self.size_bytes)


# -- Formatting ----------------------------------------------------------------


def format_age(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def format_size(size: int | None) -> str:
    if size is None:
        return "-"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def count_items(data: Any) -> int:
    """Item count for status display.

    A list counts its elements, a mapping with a ``nodes`` list (GraphQL
    connection shape) counts the nodes, anything else counts as one.
    """
    if isinstance(data, list):
        return len(data)
    if isinstance(data, dict) and isinstance(data.get("nodes"), list):
        return len(data["nodes"])
    return 1
