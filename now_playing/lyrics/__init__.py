"""Lyrics providers and the resolver that chains them."""

from typing import List

import httpx

from .base import DEFAULT_USER_AGENT, LyricsMatch, LyricsProvider
from .greeklyrics import GreekLyricsProvider
from .lrclib import LrclibProvider
from .lyrics_ovh import LyricsOvhProvider
from .resolver import LyricsResolver


def default_providers(
    http_client: httpx.Client, user_agent: str = DEFAULT_USER_AGENT
) -> List[LyricsProvider]:
    """The standard chain: LRCLIB, then lyrics.ovh, then GreekLyrics.gr."""
    return [
        LrclibProvider(http_client, user_agent=user_agent),
        LyricsOvhProvider(http_client),
        GreekLyricsProvider(http_client),
    ]


__all__ = [
    "GreekLyricsProvider",
    "LrclibProvider",
    "LyricsMatch",
    "LyricsOvhProvider",
    "LyricsProvider",
    "LyricsResolver",
    "default_providers",
]
