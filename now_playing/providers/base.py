"""Stream provider interface and the normalization helpers all providers share."""

import html
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

import httpx

from ..config import StreamConfig
from ..models import NO_TRACK_PLAYING, ONLINE, NormalizedMetadata

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")

DEBUG_BODY_LIMIT = 500


def clean_text(value: Any) -> str:
    """Sanitize a single-line text field from an upstream server.

    Strips HTML tags, decodes entities, collapses whitespace and trims.
    """
    if value is None:
        return ""
    text = _TAG_RE.sub("", str(value))
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def to_uint(value: Any) -> int:
    """Coerce a listener count (int, float or numeric string) to a non-negative int."""
    try:
        return abs(int(float(value)))
    except (TypeError, ValueError):
        return 0


def split_title(raw_title: str) -> Tuple[str, str]:
    """Split a raw "Artist - Title" string into (artist, title).

    " - " is tried first so hyphenated words survive when a clean delimiter
    exists, then a bare "-". Without a separator the whole string is the
    title. When both halves end up empty the artist becomes
    "No track playing".
    """
    if " - " in raw_title:
        artist, title = raw_title.split(" - ", 1)
        artist, title = artist.strip(), title.strip()
    elif "-" in raw_title:
        artist, title = raw_title.split("-", 1)
        artist, title = artist.strip(), title.strip()
    else:
        artist, title = "", raw_title

    if not artist and not title:
        artist = NO_TRACK_PLAYING

    return artist, title


def build_metadata(
    raw_title: str, listeners: int, stream_status: str = ONLINE
) -> NormalizedMetadata:
    """Normalize a raw title and listener count into NormalizedMetadata."""
    artist, title = split_title(raw_title)
    return NormalizedMetadata(
        artist=artist,
        title=title,
        album="",
        listeners=listeners,
        stream_status=stream_status,
        raw_title=raw_title,
    )


class StreamProvider(ABC):
    """Fetches now-playing stats from one kind of streaming server.

    fetch_metadata never raises: transport errors, bad payloads and
    configuration mismatches all come back as offline metadata with an
    ``error`` string.
    """

    name = "base"

    def __init__(self, http_client: httpx.Client):
        """Initialize provider.

        Args:
            http_client: Shared HTTP client.
        """
        self.http = http_client

    @abstractmethod
    def fetch_metadata(self, config: StreamConfig) -> NormalizedMetadata:
        """Fetch and normalize the current track for the configured stream."""

    @abstractmethod
    def normalize_data(self, raw_data: Dict[str, Any], config: StreamConfig) -> NormalizedMetadata:
        """Map a server-specific stats record onto NormalizedMetadata."""

    def is_stream_online(self, config: StreamConfig) -> bool:
        return self.fetch_metadata(config).is_online

    def _get(self, url: str, config: StreamConfig) -> httpx.Response:
        if config.debug:
            logger.info(f"[{self.name}] Fetching metadata from: {url}")
        response = self.http.get(url, timeout=config.connection_timeout)
        if config.debug:
            logger.info(
                f"[{self.name}] Response {response.status_code}: "
                f"{response.text[:DEBUG_BODY_LIMIT]}"
            )
        return response

    def _error(self, message: str, config: StreamConfig) -> NormalizedMetadata:
        if config.debug:
            logger.info(f"[{self.name}] Returning offline metadata: {message}")
        else:
            logger.warning(f"[{self.name}] Stream metadata unavailable: {message}")
        return NormalizedMetadata.offline(clean_text(message))
