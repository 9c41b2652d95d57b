"""GreekLyrics.gr scraper, the last resort for Greek-language tracks.

There is no API; the page URL is guessed from a transliterated slug and the
lyrics are cut out of the HTML with a few regexes. Expect breakage whenever
the site changes its markup.
"""

import html
import re
from typing import Optional

from .base import LyricsMatch, LyricsProvider, clean_lyrics

GREEKLYRICS_URL = "https://www.greeklyrics.gr"
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
MIN_LYRICS_LENGTH = 50

GREEK_TO_LATIN = str.maketrans(
    {
        "α": "a", "ά": "a", "β": "v", "γ": "g", "δ": "d",
        "ε": "e", "έ": "e", "ζ": "z", "η": "i", "ή": "i",
        "θ": "th", "ι": "i", "ί": "i", "ϊ": "i", "ΐ": "i",
        "κ": "k", "λ": "l", "μ": "m", "ν": "n", "ξ": "ks",
        "ο": "o", "ό": "o", "π": "p", "ρ": "r", "σ": "s",
        "ς": "s", "τ": "t", "υ": "y", "ύ": "y", "ϋ": "y",
        "ΰ": "y", "φ": "f", "χ": "x", "ψ": "ps", "ω": "o",
        "ώ": "o",
    }
)  # fmt: skip

LYRICS_PATTERNS = (
    re.compile(r"<div[^>]*class=\"[^\"]*lyrics[^\"]*\"[^>]*>(.*?)</div>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<div[^>]*id=\"[^\"]*lyrics[^\"]*\"[^>]*>(.*?)</div>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<pre[^>]*>(.*?)</pre>", re.IGNORECASE | re.DOTALL),
)

_NON_SLUG_RE = re.compile(r"[^\w\s-]|_")
_WS_RE = re.compile(r"\s+")
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def greeklyrics_slug(text: str) -> str:
    """Build the URL slug GreekLyrics.gr uses for an artist or title."""
    text = _NON_SLUG_RE.sub("", text.strip())
    text = _WS_RE.sub("-", text).lower()
    return text.translate(GREEK_TO_LATIN)


def parse_lyrics_html(page: str) -> str:
    """Extract lyrics from a GreekLyrics.gr page.

    Patterns are tried in order; the first one whose cleaned text is longer
    than MIN_LYRICS_LENGTH characters wins. Returns "" if none do.
    """
    for pattern in LYRICS_PATTERNS:
        match = pattern.search(page)
        if not match:
            continue

        text = _BR_RE.sub("\n", match.group(1))
        text = clean_lyrics(text)
        text = html.unescape(text).strip()

        if len(text) > MIN_LYRICS_LENGTH:
            return text

    return ""


class GreekLyricsProvider(LyricsProvider):
    name = "greeklyrics.gr"
    timeout = 15.0

    def __init__(self, http_client, base_url: str = GREEKLYRICS_URL):
        super().__init__(http_client)
        self.base_url = base_url.rstrip("/")

    def page_url(self, artist: str, title: str) -> str:
        return f"{self.base_url}/{greeklyrics_slug(artist)}-{greeklyrics_slug(title)}"

    def fetch(self, artist: str, title: str) -> Optional[LyricsMatch]:
        response = self._get(
            self.page_url(artist, title),
            headers={"User-Agent": BROWSER_USER_AGENT},
        )
        if response.status_code != 200:
            return None

        lyrics = parse_lyrics_html(response.text)
        return LyricsMatch(lyrics=lyrics) if lyrics else None
