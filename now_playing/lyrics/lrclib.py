"""LRCLIB provider: plain and time-synced (LRC) lyrics."""

import re
from typing import Optional

from .base import DEFAULT_USER_AGENT, LyricsMatch, LyricsProvider, clean_lyrics

LRCLIB_GET_URL = "https://lrclib.net/api/get"

_LRC_TIMESTAMP_RE = re.compile(r"^\s*(?:\[\d{1,2}:\d{2}(?:[.:]\d{1,3})?\])+\s*")


def _text_field(data: dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


def strip_lrc_timestamps(synced: str) -> str:
    """Turn LRC text into plain lyrics by dropping the [mm:ss.xx] prefixes."""
    lines = [_LRC_TIMESTAMP_RE.sub("", line) for line in synced.splitlines()]
    return "\n".join(lines).strip()


class LrclibProvider(LyricsProvider):
    """Free, keyless, good coverage, and the only source with synced lyrics."""

    name = "lrclib.net"
    timeout = 10.0

    def __init__(self, http_client, user_agent: str = DEFAULT_USER_AGENT, url: str = LRCLIB_GET_URL):
        super().__init__(http_client)
        self.user_agent = user_agent
        self.url = url

    def fetch(self, artist: str, title: str) -> Optional[LyricsMatch]:
        response = self._get(
            self.url,
            params={"artist_name": artist, "track_name": title},
            headers={"User-Agent": self.user_agent},
        )
        if response.status_code != 200:
            return None

        data = response.json()
        if not isinstance(data, dict):
            return None

        plain = _text_field(data, "plainLyrics")
        synced = _text_field(data, "syncedLyrics") or None

        if not plain and synced:
            plain = strip_lrc_timestamps(synced)

        plain = clean_lyrics(plain)
        if not plain:
            return None

        return LyricsMatch(lyrics=plain, synced_lyrics=synced)
