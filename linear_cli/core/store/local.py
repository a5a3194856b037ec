"""Local filesystem cache store.

One JSON file per cache type::

    {cache_dir}/teams.json
    {cache_dir}/users.json
    {cache_dir}/statuses.json
    {cache_dir}/labels.json

Keeping types in separate files makes clearing one type cheap and limits a
corrupt file to a single type.  Writes are atomic (temp file + rename).

Expired entries are evicted lazily by ``get``.  Two processes may race to
delete the same expired file; a failed deletion is ignored.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from linear_cli.core.files import atomic_write, remove_file
from linear_cli.core.models.cache import DEFAULT_TTL_SECONDS, CacheEntry, CacheStatus, count_items
from linear_cli.core.models.enums import CacheType
from linear_cli.core.store.base import CacheWriteError


class LocalCacheStore:
    """Local filesystem implementation of the CacheStore protocol.

    ``ttl_seconds`` applies to entries this store writes; entries already on
    disk keep the TTL they were written with.  ``clock`` returns seconds
    since epoch and exists so tests can move time without sleeping.
    """

    def __init__(
        self,
        cache_dir: str | Path,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._dir = Path(cache_dir)
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        return self._dir

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def path_for(self, cache_type: CacheType) -> Path:
        return self._dir / cache_type.filename

    def _now(self) -> int:
        return int(self._clock())

    # -- Read ------------------------------------------------------------------

    def get(self, cache_type: CacheType) -> Any | None:
        entry = self.get_entry(cache_type)
        if entry is None:
            logger.debug("Cache: miss for {}", cache_type)
            return None

        if entry.is_valid(self._now()):
            logger.debug("Cache: hit for {} (age={}s)", cache_type, entry.age_seconds(self._now()))
            return entry.data

        logger.debug("Cache: {} expired, evicting", cache_type)
        try:
            remove_file(self.path_for(cache_type))
        except OSError as exc:
            logger.debug("Cache: could not evict {}: {}", cache_type, exc)
        return None

    def get_entry(self, cache_type: CacheType) -> CacheEntry | None:
        path = self.path_for(cache_type)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cache: unreadable {} ({}), treating as miss", path, exc)
            return None

        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError:
            logger.debug("Cache: malformed {}, treating as miss", path)
            return None

    def get_keyed(self, cache_type: CacheType, key: str) -> Any | None:
        data = self.get(cache_type)
        if not isinstance(data, dict):
            return None
        return data.get(key)

    def is_valid(self, cache_type: CacheType) -> bool:
        return self.get(cache_type) is not None

    # -- Write -----------------------------------------------------------------

    def set(self, cache_type: CacheType, value: Any) -> None:
        entry = CacheEntry(timestamp=self._now(), ttl_seconds=self._ttl, data=value)
        path = self.path_for(cache_type)
        try:
            atomic_write(path, entry.model_dump_json(indent=2))
        except OSError as exc:
            msg = f"Failed to write {cache_type.display_name} cache to {path}: {exc}"
            raise CacheWriteError(msg) from exc
        logger.debug("Cache: stored {} (ttl={}s)", cache_type, self._ttl)

    def set_keyed(self, cache_type: CacheType, key: str, value: Any) -> None:
        """Insert ``key`` into the type's mapping and rewrite the whole entry.

        The rewrite stamps a new timestamp on the entry, so writing one key
        also extends the lifetime of every other key stored under this type.
        """
        data = self.get(cache_type)
        if not isinstance(data, dict):
            data = {}
        data[key] = value
        self.set(cache_type, data)

    # -- Invalidation ----------------------------------------------------------

    def clear_type(self, cache_type: CacheType) -> None:
        path = self.path_for(cache_type)
        try:
            removed = remove_file(path)
        except OSError as exc:
            msg = f"Failed to clear {cache_type.display_name} cache at {path}: {exc}"
            raise CacheWriteError(msg) from exc
        if removed:
            logger.debug("Cache: cleared {}", cache_type)

    def clear_all(self) -> None:
        for cache_type in CacheType:
            self.clear_type(cache_type)

    # -- Introspection ---------------------------------------------------------

    def status(self) -> list[CacheStatus]:
        now = self._now()
        statuses: list[CacheStatus] = []
        for cache_type in CacheType:
            entry = self.get_entry(cache_type)
            if entry is None:
                statuses.append(CacheStatus(cache_type=cache_type))
                continue

            try:
                size = self.path_for(cache_type).stat().st_size
            except OSError:
                size = 0

            statuses.append(
                CacheStatus(
                    cache_type=cache_type,
                    valid=entry.is_valid(now),
                    age_seconds=entry.age_seconds(now),
                    size_bytes=size,
                    item_count=count_items(entry.data),
                )
            )
        return statuses
