"""Common interface for lyrics providers."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "NowPlayingService/1.0"
DEBUG_BODY_LIMIT = 200


@dataclass(frozen=True)
class LyricsMatch:
    """Lyrics text returned by one provider."""

    lyrics: str
    synced_lyrics: Optional[str] = None


class LyricsProvider(ABC):
    """A single lyrics source.

    fetch returns None when the source has nothing for the track. It may
    raise httpx.HTTPError or ValueError on transport or decode failures; the
    resolver treats those as a miss.
    """

    name = "base"
    timeout = 10.0

    def __init__(self, http_client: httpx.Client):
        """Initialize provider.

        Args:
            http_client: Shared HTTP client.
        """
        self.http = http_client

    @abstractmethod
    def fetch(self, artist: str, title: str) -> Optional[LyricsMatch]:
        """Look up lyrics for artist/title."""

    def _get(self, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"[{self.name}] GET {url}")
        response = self.http.get(url, timeout=self.timeout, **kwargs)
        logger.debug(
            f"[{self.name}] Response {response.status_code}: "
            f"{response.text[:DEBUG_BODY_LIMIT]}"
        )
        return response


_TAG_RE = re.compile(r"<[^>]*>")


def clean_lyrics(text: Optional[str]) -> str:
    """Strip markup from multi-line lyrics, keeping line breaks."""
    if not text:
        return ""
    text = _TAG_RE.sub("", text).replace("\r\n", "\n")
    lines = [line.rstrip() for line in text.split("\n")]
    return "\n".join(lines).strip()
