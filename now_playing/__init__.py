"""Now-playing metadata service for Icecast and Shoutcast radio streams.

This package polls the streaming server for the current track, enriches it
with artwork and duration from iTunes, looks up lyrics from a chain of
public sources, and serves the result to web front-ends over HTTP.

Version: 1.0.0
"""

__version__ = "1.0.0"

from .api import RadioAPI
from .artwork import ArtworkService
from .cache import TTLCache
from .config import PlayerSettings
from .lyrics import LyricsResolver
from .models import LyricsResult, NormalizedMetadata, TrackInfo
from .stream_manager import StreamManager

__all__ = [
    "ArtworkService",
    "LyricsResolver",
    "LyricsResult",
    "NormalizedMetadata",
    "PlayerSettings",
    "RadioAPI",
    "StreamManager",
    "TTLCache",
    "TrackInfo",
]
