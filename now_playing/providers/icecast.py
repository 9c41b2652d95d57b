"""Icecast provider: reads /status-json.xsl and picks the configured mount."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import StreamConfig
from ..models import NormalizedMetadata
from .base import StreamProvider, build_metadata, clean_text, to_uint

logger = logging.getLogger(__name__)


class IcecastProvider(StreamProvider):
    """Icecast 2.x JSON status provider."""

    name = "icecast"

    def fetch_metadata(self, config: StreamConfig) -> NormalizedMetadata:
        stats_url = config.base_url.rstrip("/") + "/status-json.xsl"
        mount_point = config.mount_point.strip().lstrip("/")

        try:
            response = self._get(stats_url, config)
            data = response.json()
        except httpx.HTTPError as e:
            return self._error(str(e) or type(e).__name__, config)
        except ValueError:
            return self._error("Invalid response from Icecast server", config)

        sources = self._extract_sources(data)
        if sources is None:
            return self._error("Invalid response from Icecast server", config)

        mount_data = self._find_mount(sources, mount_point)
        if mount_data is None:
            return self._error("Mount point not found", config)

        return self.normalize_data(mount_data, config)

    def normalize_data(self, raw_data: Dict[str, Any], config: StreamConfig) -> NormalizedMetadata:
        """Normalize one Icecast source record.

        Icecast has no album field, so album is always empty.
        """
        raw_title = clean_text(raw_data.get("title", ""))
        return build_metadata(raw_title, to_uint(raw_data.get("listeners", 0)))

    @staticmethod
    def _extract_sources(data: Any) -> Optional[List[Dict[str, Any]]]:
        """Return icestats.source as a list; a single mount is a bare object."""
        if not isinstance(data, dict):
            return None
        icestats = data.get("icestats")
        if not isinstance(icestats, dict) or "source" not in icestats:
            return None

        sources = icestats["source"]
        if isinstance(sources, dict):
            return [sources]
        if isinstance(sources, list):
            return [source for source in sources if isinstance(source, dict)]
        return None

    @staticmethod
    def _find_mount(
        sources: List[Dict[str, Any]], mount_point: str
    ) -> Optional[Dict[str, Any]]:
        for source in sources:
            listen_url = source.get("listenurl")
            if isinstance(listen_url, str) and mount_point in listen_url:
                return source
        return None
