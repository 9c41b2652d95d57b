"""Artwork and track duration lookups against the iTunes search API."""

import logging
from typing import Optional, Union

import httpx

from .cache import TRACK_INFO_PREFIX, TTLCache, track_key
from .config import ArtworkConfig
from .metrics import MetricsExporter
from .models import TrackInfo

logger = logging.getLogger(__name__)

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
REQUEST_TIMEOUT_SECONDS = 5.0

BASE_SIZE_TOKEN = "100x100"
SIZE_TOKENS = {
    "small": "60x60",
    "medium": "300x300",
    "large": "600x600",
    "xlarge": "1000x1000",
}
DEFAULT_SIZE = "medium"


def resize_artwork_url(url: str, size: str) -> str:
    """Swap the 100x100 token in an iTunes artwork URL for the requested size."""
    token = SIZE_TOKENS.get(size, SIZE_TOKENS[DEFAULT_SIZE])
    return url.replace(BASE_SIZE_TOKEN, token)


class ArtworkService:
    """Looks up artwork URL and duration per artist/title, cached per track.

    The cache holds the base (100x100) URL so one entry serves every size.
    Negative answers are cached like positive ones; transport failures are
    not cached.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        cache: TTLCache,
        metrics: Optional[MetricsExporter] = None,
        search_url: str = ITUNES_SEARCH_URL,
    ):
        self.http = http_client
        self.cache = cache
        self.metrics = metrics or MetricsExporter()
        self.search_url = search_url

    def get_track_info(
        self,
        artist: str,
        title: str,
        size: str = DEFAULT_SIZE,
        config: Optional[ArtworkConfig] = None,
    ) -> TrackInfo:
        """Get artwork URL and duration for a track.

        Args:
            artist: Artist name.
            title: Track title.
            size: small, medium, large or xlarge.
            config: Artwork settings (cache duration). Defaults when omitted.

        Returns:
            TrackInfo: artwork_url is False when nothing was found.
        """
        if not artist or not title:
            return TrackInfo(artwork_url=False, duration_ms=0)

        config = config or ArtworkConfig()
        cache_key = track_key(TRACK_INFO_PREFIX, artist, title)

        base_info = self.cache.get(cache_key)
        self.metrics.record_cache("trackinfo", hit=base_info is not None)

        if base_info is None:
            base_info = self._fetch_track_info(artist, title)
            if base_info is None:
                return TrackInfo(artwork_url=False, duration_ms=0)
            self.cache.set(cache_key, base_info, config.cache_duration * 60)

        artwork_url = base_info.artwork_url
        if artwork_url:
            artwork_url = resize_artwork_url(artwork_url, size)

        return TrackInfo(artwork_url=artwork_url, duration_ms=base_info.duration_ms)

    def get_artwork(
        self,
        artist: str,
        title: str,
        size: str = DEFAULT_SIZE,
        config: Optional[ArtworkConfig] = None,
    ) -> Union[str, bool]:
        """Artwork URL only, or False if there is none."""
        return self.get_track_info(artist, title, size, config).artwork_url

    def _fetch_track_info(self, artist: str, title: str) -> Optional[TrackInfo]:
        """Query iTunes for the first matching song.

        Returns:
            TrackInfo with the unsized artwork URL, an empty TrackInfo when
            iTunes had no match, or None when the request itself failed.
        """
        params = {
            "term": f"{artist} {title}",
            "media": "music",
            "entity": "song",
            "limit": 1,
        }

        try:
            response = self.http.get(
                self.search_url, params=params, timeout=REQUEST_TIMEOUT_SECONDS
            )
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Artwork lookup failed for {artist} - {title}: {e}")
            self.metrics.record_artwork_lookup("error")
            return None
        except ValueError:
            logger.warning(f"Artwork lookup returned invalid JSON for {artist} - {title}")
            self.metrics.record_artwork_lookup("error")
            return None

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            self.metrics.record_artwork_lookup("not_found")
            return TrackInfo(artwork_url=False, duration_ms=0)

        track = results[0]
        artwork_url = track.get("artworkUrl100")
        if not isinstance(artwork_url, str) or not artwork_url:
            artwork_url = False

        try:
            duration_ms = abs(int(track.get("trackTimeMillis") or 0))
        except (TypeError, ValueError, OverflowError):
            duration_ms = 0

        self.metrics.record_artwork_lookup("found" if artwork_url else "not_found")
        return TrackInfo(artwork_url=artwork_url, duration_ms=duration_ms)

    def clear_cache(self) -> int:
        return self.cache.clear_prefix(TRACK_INFO_PREFIX)
