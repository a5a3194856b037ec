"""Cache store interface.

The cache is a read-through, TTL-expiring, best-effort mirror of reference
data (teams, users, workflow statuses, labels).  Reads never fail: a
missing, unreadable or malformed entry is simply a miss.  Writes do fail
loudly, since a failed write usually means a broken environment (disk full,
permissions).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from linear_cli.core.models.cache import CacheEntry, CacheStatus
from linear_cli.core.models.enums import CacheType


class CacheWriteError(OSError):
    """Raised when a cache entry cannot be written or removed."""


@runtime_checkable
class CacheStore(Protocol):
    """Sync protocol for per-type cache storage.

    Each ``CacheType`` holds one value.  A value that is a mapping may be
    addressed by sub-key through ``get_keyed`` / ``set_keyed``; expiry
    always applies to the whole type.
    """

    def get(self, cache_type: CacheType) -> Any | None:
        """Return the cached value if present and unexpired.  Evicts expired entries."""
        ...

    def get_entry(self, cache_type: CacheType) -> CacheEntry | None:
        """Return the raw entry (no validity filter, no eviction)."""
        ...

    def set(self, cache_type: CacheType, value: Any) -> None:
        """Overwrite the entry with a fresh timestamp.  Raises ``CacheWriteError``."""
        ...

    def get_keyed(self, cache_type: CacheType, key: str) -> Any | None:
        ...

    def set_keyed(self, cache_type: CacheType, key: str, value: Any) -> None:
        ...

    def is_valid(self, cache_type: CacheType) -> bool:
        ...

    def clear_type(self, cache_type: CacheType) -> None:
        """Delete the entry.  No-op if absent."""
        ...

    def clear_all(self) -> None:
        ...

    def status(self) -> list[CacheStatus]:
        """Status of every cache type, in enum order.  Does not evict."""
        ...
