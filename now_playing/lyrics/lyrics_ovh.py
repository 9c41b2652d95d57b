"""lyrics.ovh provider: plain lyrics only."""

from typing import Optional
from urllib.parse import quote

from .base import LyricsMatch, LyricsProvider, clean_lyrics

LYRICS_OVH_URL = "https://api.lyrics.ovh/v1"


class LyricsOvhProvider(LyricsProvider):
    name = "lyrics.ovh"
    timeout = 10.0

    def __init__(self, http_client, base_url: str = LYRICS_OVH_URL):
        super().__init__(http_client)
        self.base_url = base_url.rstrip("/")

    def fetch(self, artist: str, title: str) -> Optional[LyricsMatch]:
        url = f"{self.base_url}/{quote(artist, safe='')}/{quote(title, safe='')}"
        response = self._get(url)
        if response.status_code != 200:
            return None

        data = response.json()
        text = data.get("lyrics") if isinstance(data, dict) else None
        lyrics = clean_lyrics(text) if isinstance(text, str) else ""
        return LyricsMatch(lyrics=lyrics) if lyrics else None
