"""Result types shared by providers, services and the HTTP layer."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union

ONLINE = "online"
OFFLINE = "offline"
NO_TRACK_PLAYING = "No track playing"


@dataclass(frozen=True)
class NormalizedMetadata:
    """Now-playing state in the common shape every provider produces."""

    artist: str = ""
    title: str = ""
    album: str = ""
    listeners: int = 0
    stream_status: str = OFFLINE
    raw_title: str = ""
    error: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self.stream_status == ONLINE

    @classmethod
    def empty(cls) -> "NormalizedMetadata":
        """All-empty offline metadata with no error recorded."""
        return cls()

    @classmethod
    def offline(cls, error: str) -> "NormalizedMetadata":
        """Offline metadata carrying the reason the fetch failed."""
        return cls(error=error)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "artist": self.artist,
            "title": self.title,
            "album": self.album,
            "listeners": self.listeners,
            "stream_status": self.stream_status,
            "raw_title": self.raw_title,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class TrackInfo:
    """Artwork URL and duration looked up for one artist/title pair."""

    artwork_url: Union[str, bool] = False
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"artwork_url": self.artwork_url, "duration_ms": self.duration_ms}


@dataclass(frozen=True)
class LyricsResult:
    """Lyrics for a track, or the empty variant carrying a message."""

    lyrics: str = ""
    source: str = ""
    artist: Optional[str] = None
    title: Optional[str] = None
    synced_lyrics: Optional[str] = None
    is_synced: Optional[bool] = None
    message: Optional[str] = None
    cached: Optional[bool] = None

    @property
    def found(self) -> bool:
        return bool(self.lyrics)

    @classmethod
    def empty(cls, message: str) -> "LyricsResult":
        return cls(message=message)

    def with_cached(self, cached: bool) -> "LyricsResult":
        return replace(self, cached=cached)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"lyrics": self.lyrics, "source": self.source}
        for name in ("artist", "title", "synced_lyrics", "is_synced", "message", "cached"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data
