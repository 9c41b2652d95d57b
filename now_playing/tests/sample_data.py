"""Canned upstream payloads and HTTP test doubles."""

from typing import Callable, List, Optional

import httpx

ITUNES_ARTWORK_100 = "https://is1-ssl.mzstatic.com/image/thumb/Music/ab/cd/ef/100x100bb.jpg"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    def count(self, method: Optional[str] = None) -> int:
        if method is None:
            return len(self.requests)
        return sum(1 for request in self.requests if request.method == method)


def icecast_status(*sources) -> dict:
    """Build an Icecast status-json.xsl body. One source is a bare object."""
    if len(sources) == 1:
        return {"icestats": {"source": sources[0]}}
    return {"icestats": {"source": list(sources)}}


def shoutcast_v1_xml(songtitle: str, listeners: int = 0, status: int = 1) -> bytes:
    return (
        '<?xml version="1.0" standalone="yes"?>'
        "<SHOUTCASTSERVER>"
        f"<CURRENTLISTENERS>{listeners}</CURRENTLISTENERS>"
        f"<STREAMSTATUS>{status}</STREAMSTATUS>"
        f"<SONGTITLE>{songtitle}</SONGTITLE>"
        "</SHOUTCASTSERVER>"
    ).encode("utf-8")


def itunes_body(artwork_url: str = ITUNES_ARTWORK_100, duration_ms: int = 215000) -> dict:
    return {
        "resultCount": 1,
        "results": [{"artworkUrl100": artwork_url, "trackTimeMillis": duration_ms}],
    }
