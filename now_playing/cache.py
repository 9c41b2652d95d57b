"""Time-bounded in-process cache shared by metadata, artwork and lyrics lookups.

Entries are never evicted except by expiry or an explicit prefix purge.
Concurrent misses on the same key may both fetch upstream; the last write
wins.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

METADATA_PREFIX = "metadata:"
TRACK_INFO_PREFIX = "trackinfo:"
LYRICS_PREFIX = "lyrics:"

ALL_PREFIXES = (METADATA_PREFIX, TRACK_INFO_PREFIX, LYRICS_PREFIX)


def track_key(prefix: str, artist: str, title: str) -> str:
    """Cache key for an artist/title pair, case-insensitive."""
    digest = hashlib.md5((artist + title).lower().encode("utf-8")).hexdigest()
    return f"{prefix}{digest}"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the clock reading after which it is stale."""

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class TTLCache:
    """Thread-safe key/value store with per-entry time-to-live."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the cache.

        Args:
            clock: Monotonic time source in seconds. Injectable for tests.
        """
        self._clock = clock
        self._lock = Lock()
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the value for key, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store value under key for ttl_seconds."""
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key, value=value, expires_at=self._clock() + ttl_seconds
            )

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix.

        Returns:
            int: Number of entries removed.
        """
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                del self._entries[key]
        logger.info(f"Cleared {len(keys)} cache entries with prefix '{prefix}'")
        return len(keys)

    def clear_all(self) -> int:
        """Remove every entry owned by the now-playing services."""
        return sum(self.clear_prefix(prefix) for prefix in ALL_PREFIXES)

    def purge_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
