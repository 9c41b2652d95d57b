"""Shoutcast provider covering v2 (JSON stats) and v1 (XML stats) servers.

The JSON endpoint is tried first; if the body has no ``songtitle`` the XML
endpoint is used instead. This serves both versions without configuration at
the cost of one wasted request against v1 servers.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional
from xml.etree.ElementTree import ParseError

import httpx
from defusedxml import ElementTree as ET
from defusedxml.common import DefusedXmlException

from ..config import StreamConfig
from ..models import OFFLINE, ONLINE, NormalizedMetadata
from .base import StreamProvider, build_metadata, clean_text, to_uint

logger = logging.getLogger(__name__)


class ShoutcastProvider(StreamProvider):
    """Shoutcast v1/v2 stats provider."""

    name = "shoutcast"

    def fetch_metadata(self, config: StreamConfig) -> NormalizedMetadata:
        base_url = config.base_url.rstrip("/;,")
        sid = config.stream_id or 1

        json_data = self._fetch_json(f"{base_url}/stats?sid={sid}&json=1", config)
        if json_data is not None:
            return self.normalize_data(json_data, config)

        try:
            response = self._get(f"{base_url}/stats?sid={sid}", config)
        except httpx.HTTPError as e:
            return self._error(str(e) or type(e).__name__, config)

        xml_data = self._parse_xml(response.content)
        if xml_data is None:
            if config.debug:
                logger.info(f"[shoutcast] Failed to parse XML. Raw response: {response.text}")
            return self._error("Invalid response from Shoutcast server", config)

        if config.debug:
            logger.info(f"[shoutcast] Parsed XML data: {xml_data}")
        return self.normalize_data(xml_data, config)

    def normalize_data(self, raw_data: Dict[str, Any], config: StreamConfig) -> NormalizedMetadata:
        """Normalize a Shoutcast stats record (lower-cased v2 field names).

        A server that answered is reported online even when no source is
        connected, unless strict status mode is on and streamstatus is 0.
        """
        raw_title = clean_text(raw_data.get("songtitle", ""))
        listeners = to_uint(raw_data.get("currentlisteners", 0))

        if config.strict_shoutcast_status and to_uint(raw_data.get("streamstatus", 1)) == 0:
            metadata = build_metadata(raw_title, listeners, stream_status=OFFLINE)
            return replace(metadata, error="Stream source is not connected")

        return build_metadata(raw_title, listeners, stream_status=ONLINE)

    def _fetch_json(self, url: str, config: StreamConfig) -> Optional[Dict[str, Any]]:
        """v2 JSON stats, or None when unreachable or not a v2 payload."""
        try:
            response = self._get(url, config)
            data = response.json()
        except httpx.HTTPError as e:
            logger.debug(f"[shoutcast] JSON stats request failed: {e}")
            return None
        except ValueError:
            return None

        if isinstance(data, dict) and "songtitle" in data:
            if config.debug:
                logger.info(f"[shoutcast] Found songtitle in JSON: {data['songtitle']}")
            return data
        return None

    @staticmethod
    def _parse_xml(body: bytes) -> Optional[Dict[str, Any]]:
        """Map v1 SHOUTCASTSERVER XML onto the v2 field names."""
        try:
            root = ET.fromstring(body)
        except (ParseError, DefusedXmlException, ValueError):
            return None

        return {
            "songtitle": root.findtext("SONGTITLE") or "",
            "currentlisteners": to_uint(root.findtext("CURRENTLISTENERS")),
            "streamstatus": to_uint(root.findtext("STREAMSTATUS")),
        }
