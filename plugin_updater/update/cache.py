"""
Release metadata cache

Time-boxed key/value cache for fetched releases. Entries expire lazily:
a lookup at or after expires_at behaves exactly like a miss.

Cache file location (JsonFileCacheStore): ~/.plugin-updater/release-cache.json
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Protocol

from plugin_updater.core.config import SIX_HOURS
from plugin_updater.update.models import CacheEntry, ReleaseMetadata

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "ghpu_"


def cache_key(slug: str) -> str:
    """
    Derive the cache key for a component

    Args:
        slug: Component slug

    Returns:
        "ghpu_" followed by the md5 hex digest of the slug
    """
    return CACHE_KEY_PREFIX + hashlib.md5(slug.encode("utf-8")).hexdigest()


class CacheStore(Protocol):
    """Protocol for the shared key/value service backing the cache"""

    def read(self, key: str) -> dict | None:
        """Return the stored payload or None"""
        ...

    def write(self, key: str, data: dict) -> None:
        """Store a payload, overwriting any previous value"""
        ...

    def delete(self, key: str) -> None:
        """Remove a payload if present"""
        ...


class MemoryCacheStore:
    """In-process store, used by tests and short-lived hosts"""

    def __init__(self):
        self._data: dict[str, dict] = {}

    def read(self, key: str) -> dict | None:
        return self._data.get(key)

    def write(self, key: str, data: dict) -> None:
        self._data[key] = data

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class JsonFileCacheStore:
    """
    Store persisted to a single JSON file

    A missing or unreadable file is treated as an empty store. Writes go
    through a temporary file and os.replace so readers never see a
    half-written file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".release-cache-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def read(self, key: str) -> dict | None:
        value = self._load().get(key)
        return value if isinstance(value, dict) else None

    def write(self, key: str, data: dict) -> None:
        contents = self._load()
        contents[key] = data
        self._save(contents)

    def delete(self, key: str) -> None:
        contents = self._load()
        if contents.pop(key, None) is not None:
            self._save(contents)


class ResponseCache:
    """
    TTL cache of ReleaseMetadata keyed by component

    Example:
        cache = ResponseCache(MemoryCacheStore())
        key = cache_key("widget")
        cache.put(key, metadata)
        entry = cache.get(key)  # None once six hours have passed
    """

    def __init__(
        self,
        store: CacheStore | None = None,
        ttl: float = SIX_HOURS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache

        Args:
            store: Backing key/value store (in-memory if not provided)
            ttl: Default time-to-live in seconds
            clock: Returns the current epoch time
        """
        self.store = store if store is not None else MemoryCacheStore()
        self.ttl = ttl
        self.clock = clock

    def get(self, key: str) -> CacheEntry | None:
        """
        Look up a cached release

        Returns:
            CacheEntry, or None on a miss, an expired entry, or a corrupted payload
        """
        payload = self.store.read(key)
        if payload is None:
            return None

        try:
            entry = CacheEntry.from_dict(key, payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupted cache entry {key}: {e}")
            self.store.delete(key)
            return None

        if entry.is_expired(self.clock()):
            logger.debug(f"Cache entry {key} expired")
            self.store.delete(key)
            return None

        return entry

    def put(
        self,
        key: str,
        value: ReleaseMetadata,
        ttl: float | None = None,
        repository: str = "",
    ) -> CacheEntry:
        """
        Store a release, overwriting any previous entry

        Args:
            key: Cache key (see cache_key())
            value: Release metadata
            ttl: Time-to-live in seconds (defaults to the cache TTL)
            repository: "owner/repo" the release was fetched from

        Returns:
            The stored entry
        """
        entry = CacheEntry(
            key=key,
            value=value,
            expires_at=self.clock() + (self.ttl if ttl is None else ttl),
            repository=repository,
        )
        self.store.write(key, entry.to_dict())
        logger.debug(f"Cached release {value.tag_name or '<none>'} under {key}")
        return entry
