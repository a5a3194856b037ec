"""Cache store implementations for reference data."""

from linear_cli.core.store.base import CacheStore, CacheWriteError
from linear_cli.core.store.local import LocalCacheStore

__all__ = ["CacheStore", "CacheWriteError", "LocalCacheStore"]
