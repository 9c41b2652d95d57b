"""Station configuration for the now-playing service.

The host settings store hands us a flat dictionary of options (the same keys
the admin screen writes). These dataclasses give that dictionary a shape and
are threaded explicitly through every call instead of being re-read at each
layer.
"""

import hashlib
import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional

STREAM_TYPES = ("icecast", "shoutcast", "shoutcast_v1", "shoutcast_v2")
ARTWORK_SIZES = ("small", "medium", "large", "xlarge")

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _as_bool(value: Any, default: bool) -> bool:
    """Coerce a settings value to bool ("1", "true", "on"... are True)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_uint(value: Any, default: int) -> int:
    """Coerce a settings value to a non-negative integer."""
    if value is None or value == "":
        return default
    try:
        return abs(int(float(value)))
    except (TypeError, ValueError):
        return default


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value).strip()


@dataclass(frozen=True)
class StreamConfig:
    """Where and how to poll the streaming server."""

    stream_type: str = "icecast"
    base_url: str = ""
    mount_point: str = ""
    stream_id: int = 1
    connection_timeout: int = 5
    refresh_interval: int = 10
    enable_metadata_fetch: bool = True
    debug: bool = False
    # Honor Shoutcast STREAMSTATUS=0 as offline
    strict_shoutcast_status: bool = False


@dataclass(frozen=True)
class DisplayConfig:
    """Front-end display toggles echoed back with every metadata response."""

    show_artist: bool = True
    show_title: bool = True
    show_album: bool = True
    show_artwork: bool = True
    show_listeners: bool = True
    show_status: bool = True
    show_lyrics: bool = False
    show_track_time: bool = False
    fallback_text: str = "No track information available"
    fallback_image: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LyricsConfig:
    """Lyrics lookup settings. cache_duration is in minutes."""

    enabled: bool = False
    cache_duration: int = 1440
    custom_message: str = "Lyrics not available"


@dataclass(frozen=True)
class ArtworkConfig:
    """Artwork lookup settings. cache_duration is in minutes."""

    enabled: bool = True
    size: str = "medium"
    cache_duration: int = 1440


@dataclass(frozen=True)
class PlayerSettings:
    """The full effective configuration for one request."""

    stream: StreamConfig = field(default_factory=StreamConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    lyrics: LyricsConfig = field(default_factory=LyricsConfig)
    artwork: ArtworkConfig = field(default_factory=ArtworkConfig)

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]]) -> "PlayerSettings":
        """Build settings from the host's flat option dictionary.

        Args:
            options: Option name to value mapping. Missing keys use defaults.

        Returns:
            PlayerSettings: Parsed settings.
        """
        opts = dict(options or {})
        stream_defaults = StreamConfig()
        display_defaults = DisplayConfig()
        lyrics_defaults = LyricsConfig()
        artwork_defaults = ArtworkConfig()

        stream = StreamConfig(
            stream_type=_as_str(opts.get("stream_type"), stream_defaults.stream_type).lower(),
            base_url=_as_str(opts.get("stream_url"), stream_defaults.base_url),
            mount_point=_as_str(opts.get("mount_point"), stream_defaults.mount_point),
            stream_id=_as_uint(opts.get("sid"), stream_defaults.stream_id),
            connection_timeout=_as_uint(
                opts.get("connection_timeout"), stream_defaults.connection_timeout
            ),
            refresh_interval=_as_uint(
                opts.get("refresh_interval"), stream_defaults.refresh_interval
            ),
            enable_metadata_fetch=_as_bool(
                opts.get("enable_metadata_fetch"), stream_defaults.enable_metadata_fetch
            ),
            debug=_as_bool(opts.get("debug_mode"), stream_defaults.debug),
            strict_shoutcast_status=_as_bool(
                opts.get("strict_shoutcast_status"), stream_defaults.strict_shoutcast_status
            ),
        )

        display = DisplayConfig(
            show_artist=_as_bool(opts.get("show_artist"), display_defaults.show_artist),
            show_title=_as_bool(opts.get("show_title"), display_defaults.show_title),
            show_album=_as_bool(opts.get("show_album"), display_defaults.show_album),
            show_artwork=_as_bool(opts.get("show_artwork"), display_defaults.show_artwork),
            show_listeners=_as_bool(opts.get("show_listeners"), display_defaults.show_listeners),
            show_status=_as_bool(opts.get("show_status"), display_defaults.show_status),
            show_lyrics=_as_bool(opts.get("show_lyrics"), display_defaults.show_lyrics),
            show_track_time=_as_bool(
                opts.get("show_track_time"), display_defaults.show_track_time
            ),
            fallback_text=_as_str(opts.get("fallback_text"), display_defaults.fallback_text),
            fallback_image=_as_str(opts.get("fallback_image"), display_defaults.fallback_image),
        )

        lyrics = LyricsConfig(
            enabled=_as_bool(opts.get("enable_lyrics"), lyrics_defaults.enabled),
            cache_duration=_as_uint(
                opts.get("lyrics_cache_duration"), lyrics_defaults.cache_duration
            ),
            custom_message=_as_str(
                opts.get("custom_lyrics_message"), lyrics_defaults.custom_message
            ),
        )

        artwork = ArtworkConfig(
            enabled=_as_bool(opts.get("enable_external_artwork"), artwork_defaults.enabled),
            size=_as_str(opts.get("artwork_size"), artwork_defaults.size).lower(),
            cache_duration=_as_uint(
                opts.get("artwork_cache_duration"), artwork_defaults.cache_duration
            ),
        )

        return cls(stream=stream, display=display, lyrics=lyrics, artwork=artwork)

    @classmethod
    def from_env(cls) -> "PlayerSettings":
        """Load settings from environment variables.

        Each option is read from the upper-cased option name, e.g.
        ``STREAM_TYPE``, ``STREAM_URL``, ``MOUNT_POINT``, ``SID``.

        Returns:
            PlayerSettings: Settings built from the environment.
        """
        names = (
            "stream_type",
            "stream_url",
            "mount_point",
            "sid",
            "connection_timeout",
            "refresh_interval",
            "enable_metadata_fetch",
            "debug_mode",
            "strict_shoutcast_status",
            "show_artist",
            "show_title",
            "show_album",
            "show_artwork",
            "show_listeners",
            "show_status",
            "show_lyrics",
            "show_track_time",
            "fallback_text",
            "fallback_image",
            "enable_lyrics",
            "lyrics_cache_duration",
            "custom_lyrics_message",
            "enable_external_artwork",
            "artwork_size",
            "artwork_cache_duration",
        )
        options = {}
        for name in names:
            value = os.getenv(name.upper())
            if value is not None:
                options[name] = value
        return cls.from_dict(options)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If configuration values are invalid.
        """
        if self.stream.connection_timeout < 1 or self.stream.connection_timeout > 30:
            raise ValueError("Connection timeout must be between 1 and 30 seconds")

        if self.stream.refresh_interval > 300:
            raise ValueError("Refresh interval must be at most 300 seconds")

        if self.stream.stream_id < 1:
            raise ValueError("Stream ID (sid) must be at least 1")

        if self.artwork.size not in ARTWORK_SIZES:
            raise ValueError(
                f"Invalid artwork size '{self.artwork.size}'. "
                f"Must be one of: {', '.join(ARTWORK_SIZES)}"
            )

        if self.lyrics.cache_duration < 1:
            raise ValueError("Lyrics cache duration must be at least 1 minute")

        if self.artwork.cache_duration < 1:
            raise ValueError("Artwork cache duration must be at least 1 minute")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def fingerprint(self) -> str:
        """Stable hash of the whole effective configuration.

        Any settings change yields a new fingerprint. Keys are sorted so the
        hash does not depend on field ordering.
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
