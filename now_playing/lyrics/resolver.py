"""Lyrics lookup across an ordered chain of providers, cached per track."""

import logging
from typing import List, Optional, Sequence

import httpx

from ..cache import LYRICS_PREFIX, TTLCache, track_key
from ..config import LyricsConfig
from ..metrics import MetricsExporter
from ..models import LyricsResult
from .base import LyricsMatch, LyricsProvider

logger = logging.getLogger(__name__)


class LyricsResolver:
    """Tries each provider in order and returns the first non-empty result.

    No retries within a provider and no parallel dispatch. Both hits and
    "not found" results are cached for the configured duration.
    """

    def __init__(
        self,
        providers: Sequence[LyricsProvider],
        cache: TTLCache,
        metrics: Optional[MetricsExporter] = None,
    ):
        """Initialize resolver.

        Args:
            providers: Providers in priority order.
            cache: Shared TTL cache.
            metrics: Metrics exporter.
        """
        self.providers: List[LyricsProvider] = list(providers)
        self.cache = cache
        self.metrics = metrics or MetricsExporter()

    def get_lyrics(
        self, artist: str, title: str, config: LyricsConfig, debug: bool = False
    ) -> LyricsResult:
        """Get lyrics for a track.

        Args:
            artist: Artist name.
            title: Track title.
            config: Lyrics settings (enabled flag, cache minutes, message).
            debug: Log each provider attempt at INFO.

        Returns:
            LyricsResult: Found lyrics, or the empty result with the
            configured message.
        """
        artist = (artist or "").strip()
        title = (title or "").strip()

        if not artist or not title or not config.enabled:
            return LyricsResult.empty(config.custom_message)

        cache_key = track_key(LYRICS_PREFIX, artist, title)
        cached = self.cache.get(cache_key)
        self.metrics.record_cache("lyrics", hit=cached is not None)
        if cached is not None:
            return cached.with_cached(True)

        result = self._resolve(artist, title, config, debug)
        self.cache.set(cache_key, result, config.cache_duration * 60)

        return result.with_cached(False)

    def _resolve(
        self, artist: str, title: str, config: LyricsConfig, debug: bool
    ) -> LyricsResult:
        for provider in self.providers:
            if debug:
                logger.info(f"Trying lyrics provider: {provider.name}")

            match = self._try_provider(provider, artist, title)
            if match is None:
                continue

            if debug:
                logger.info(
                    f"Fetched lyrics from {provider.name}, length: {len(match.lyrics)}"
                )
            self.metrics.record_lyrics_lookup(provider.name)
            return LyricsResult(
                lyrics=match.lyrics,
                source=provider.name,
                artist=artist,
                title=title,
                synced_lyrics=match.synced_lyrics or None,
                is_synced=True if match.synced_lyrics else None,
            )

        if debug:
            logger.info(f"No lyrics found from any provider for {artist} - {title}")
        self.metrics.record_lyrics_lookup("")
        return LyricsResult.empty(config.custom_message)

    @staticmethod
    def _try_provider(
        provider: LyricsProvider, artist: str, title: str
    ) -> Optional[LyricsMatch]:
        try:
            match = provider.fetch(artist, title)
        except httpx.HTTPError as e:
            logger.warning(f"Lyrics provider {provider.name} request failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Lyrics provider {provider.name} returned invalid data: {e}")
            return None

        if match is None or not match.lyrics:
            return None
        return match

    def clear_cache(self) -> int:
        return self.cache.clear_prefix(LYRICS_PREFIX)
