"""Stream providers and the stream-type dispatch table."""

from typing import Dict, Type

import httpx

from .base import StreamProvider, build_metadata, clean_text, split_title
from .icecast import IcecastProvider
from .shoutcast import ShoutcastProvider

PROVIDERS: Dict[str, Type[StreamProvider]] = {
    "icecast": IcecastProvider,
    "shoutcast": ShoutcastProvider,
    "shoutcast_v1": ShoutcastProvider,
    "shoutcast_v2": ShoutcastProvider,
}


def create_providers(http_client: httpx.Client) -> Dict[str, StreamProvider]:
    """Instantiate one provider per stream type, sharing instances per class."""
    instances: Dict[Type[StreamProvider], StreamProvider] = {}
    table: Dict[str, StreamProvider] = {}
    for stream_type, provider_cls in PROVIDERS.items():
        if provider_cls not in instances:
            instances[provider_cls] = provider_cls(http_client)
        table[stream_type] = instances[provider_cls]
    return table


__all__ = [
    "PROVIDERS",
    "IcecastProvider",
    "ShoutcastProvider",
    "StreamProvider",
    "build_metadata",
    "clean_text",
    "create_providers",
    "split_title",
]
