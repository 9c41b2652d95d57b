"""Response assembly for the front-end endpoints.

Independent of the web framework: each method takes the request's settings
and returns the JSON body. Failures are expressed as data (offline status,
empty lyrics), so every body here carries ``success: True``.
"""

import logging
from typing import Any, Dict

from .artwork import ArtworkService
from .config import PlayerSettings
from .lyrics import LyricsResolver
from .stream_manager import StreamManager

logger = logging.getLogger(__name__)


class RadioAPI:
    """Combines stream metadata, artwork and lyrics into response bodies."""

    def __init__(
        self,
        stream_manager: StreamManager,
        artwork_service: ArtworkService,
        lyrics_resolver: LyricsResolver,
    ):
        self.stream_manager = stream_manager
        self.artwork_service = artwork_service
        self.lyrics_resolver = lyrics_resolver

    def metadata_response(self, settings: PlayerSettings, force: bool = False) -> Dict[str, Any]:
        """Body for GET /metadata.

        Artwork and duration are looked up only when both artist and title
        are known. ``artwork_url`` falls back to the configured image;
        ``duration_ms`` appears only with track time enabled and a positive
        duration.
        """
        metadata = self.stream_manager.get_metadata(settings, force_refresh=force)
        data = metadata.to_dict()
        display = settings.display

        want_artwork = display.show_artwork and settings.artwork.enabled
        want_duration = display.show_track_time

        if metadata.artist and metadata.title and (want_artwork or want_duration):
            track_info = self.artwork_service.get_track_info(
                metadata.artist,
                metadata.title,
                settings.artwork.size,
                config=settings.artwork,
            )

            if want_artwork and track_info.artwork_url:
                data["artwork_url"] = track_info.artwork_url

            if want_duration and track_info.duration_ms > 0:
                data["duration_ms"] = track_info.duration_ms

        if "artwork_url" not in data and display.fallback_image:
            data["artwork_url"] = display.fallback_image

        return {
            "success": True,
            "data": data,
            "display": display.to_dict(),
        }

    def status_response(self, settings: PlayerSettings) -> Dict[str, Any]:
        """Body for GET /status."""
        return {
            "success": True,
            "data": self.stream_manager.get_statistics(settings),
        }

    def lyrics_response(self, settings: PlayerSettings, artist: str, title: str) -> Dict[str, Any]:
        """Body for GET /lyrics."""
        result = self.lyrics_resolver.get_lyrics(
            artist, title, settings.lyrics, debug=settings.stream.debug
        )
        return {"success": True, "data": result.to_dict()}

    def clear_cache_response(self) -> Dict[str, Any]:
        """Body for POST /cache/clear. Purges metadata, artwork and lyrics."""
        cleared = (
            self.stream_manager.clear_cache()
            + self.artwork_service.clear_cache()
            + self.lyrics_resolver.clear_cache()
        )
        logger.info(f"Cache cleared ({cleared} entries)")
        return {"success": True, "message": "Cache cleared successfully"}
