"""Tests for the TTL cache."""

from now_playing.cache import (
    LYRICS_PREFIX,
    METADATA_PREFIX,
    TRACK_INFO_PREFIX,
    track_key,
)


class TestTTLCache:
    """Test cases for TTLCache."""

    def test_get_missing(self, cache):
        """Test missing key returns None."""
        assert cache.get("metadata:nope") is None

    def test_set_and_get(self, cache):
        """Test stored value is returned within its TTL."""
        cache.set("metadata:a", {"title": "x"}, 10)

        assert cache.get("metadata:a") == {"title": "x"}
        assert len(cache) == 1

    def test_expiry(self, cache, clock):
        """Test entries expire after their TTL."""
        cache.set("metadata:a", "value", 10)

        clock.advance(10)
        assert cache.get("metadata:a") == "value"

        clock.advance(0.5)
        assert cache.get("metadata:a") is None
        assert len(cache) == 0

    def test_clear_prefix(self, cache):
        """Test prefix purge only removes matching keys."""
        cache.set(METADATA_PREFIX + "1", 1, 60)
        cache.set(METADATA_PREFIX + "2", 2, 60)
        cache.set(LYRICS_PREFIX + "1", 3, 60)

        removed = cache.clear_prefix(METADATA_PREFIX)

        assert removed == 2
        assert cache.get(LYRICS_PREFIX + "1") == 3
        assert len(cache) == 1

    def test_clear_all(self, cache):
        """Test clear_all empties every service prefix."""
        cache.set(METADATA_PREFIX + "1", 1, 60)
        cache.set(TRACK_INFO_PREFIX + "1", 2, 60)
        cache.set(LYRICS_PREFIX + "1", 3, 60)

        assert cache.clear_all() == 3
        assert len(cache) == 0

    def test_purge_expired(self, cache, clock):
        """Test purge_expired drops only stale entries."""
        cache.set("metadata:short", 1, 5)
        cache.set("metadata:long", 2, 50)

        clock.advance(6)

        assert cache.purge_expired() == 1
        assert cache.get("metadata:long") == 2

    def test_delete(self, cache):
        """Test deleting a key, including a missing one."""
        cache.set("lyrics:a", 1, 60)
        cache.delete("lyrics:a")
        cache.delete("lyrics:a")

        assert cache.get("lyrics:a") is None


class TestTrackKey:
    """Test cases for per-track cache keys."""

    def test_case_insensitive(self):
        """Test keys ignore artist/title case."""
        assert track_key(LYRICS_PREFIX, "Daft Punk", "One More Time") == track_key(
            LYRICS_PREFIX, "DAFT PUNK", "one more time"
        )

    def test_prefix_separates_namespaces(self):
        """Test the same track gets different keys per prefix."""
        lyrics = track_key(LYRICS_PREFIX, "Daft Punk", "One More Time")
        artwork = track_key(TRACK_INFO_PREFIX, "Daft Punk", "One More Time")

        assert lyrics != artwork
        assert lyrics.startswith(LYRICS_PREFIX)
