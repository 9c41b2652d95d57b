"""Metadata cache and refresh policy around the stream providers.

The cache TTL equals the station's refresh interval. It is short on purpose:
its job is to collapse the many front-end polls of one cycle into a single
upstream request, not to keep load off the server for minutes.
"""

import logging
import time
from datetime import datetime
from typing import Dict, Optional

import httpx

from .cache import METADATA_PREFIX, TTLCache
from .config import PlayerSettings, StreamConfig
from .metrics import MetricsExporter
from .models import OFFLINE, ONLINE, NormalizedMetadata
from .providers import StreamProvider, create_providers

logger = logging.getLogger(__name__)

# Liveness probe status codes treated as "stream is up"
ONLINE_STATUS_CODES = (200, 301, 302, 307)

MIN_CACHE_TTL_SECONDS = 1


class StreamManager:
    """Serves normalized now-playing metadata through the metadata cache."""

    def __init__(
        self,
        http_client: httpx.Client,
        cache: TTLCache,
        providers: Optional[Dict[str, StreamProvider]] = None,
        metrics: Optional[MetricsExporter] = None,
    ):
        """Initialize stream manager.

        Args:
            http_client: Shared HTTP client (used for the liveness probe).
            cache: Shared TTL cache.
            providers: Stream type to provider table. Built from the
                default providers when omitted.
            metrics: Metrics exporter.
        """
        self.http = http_client
        self.cache = cache
        self.providers = providers if providers is not None else create_providers(http_client)
        self.metrics = metrics or MetricsExporter()

    def get_metadata(
        self, settings: PlayerSettings, force_refresh: bool = False
    ) -> NormalizedMetadata:
        """Get current metadata for the configured stream.

        Args:
            settings: Full effective station settings.
            force_refresh: Bypass the cache and fetch from the server.

        Returns:
            NormalizedMetadata: Current metadata. Never raises for upstream
            failures; those come back as offline metadata.
        """
        stream = settings.stream

        if not stream.enable_metadata_fetch:
            return self.get_fallback_metadata(settings)

        cache_key = METADATA_PREFIX + settings.fingerprint()

        if not force_refresh:
            cached = self.cache.get(cache_key)
            self.metrics.record_cache("metadata", hit=cached is not None)
            if cached is not None:
                return cached

        provider = self.providers.get(stream.stream_type.lower())
        if provider is None:
            logger.warning(f"Unknown stream type '{stream.stream_type}', returning empty metadata")
            return NormalizedMetadata.empty()

        started = time.perf_counter()
        metadata = provider.fetch_metadata(stream)
        self.metrics.record_upstream_fetch(
            provider.name, metadata.stream_status, time.perf_counter() - started
        )

        ttl = max(stream.refresh_interval, MIN_CACHE_TTL_SECONDS)
        self.cache.set(cache_key, metadata, ttl)

        if stream.debug:
            logger.info(f"Metadata: {metadata.to_dict()}")

        return metadata

    def get_fallback_metadata(self, settings: PlayerSettings) -> NormalizedMetadata:
        """Metadata used when server-side fetching is disabled.

        Shows the configured fallback text and derives the status from a
        cheap HEAD request instead of parsing server stats.
        """
        fallback_text = settings.display.fallback_text
        is_online = self.check_stream_connection(settings.stream)

        return NormalizedMetadata(
            artist=fallback_text,
            title="",
            album="",
            listeners=0,
            stream_status=ONLINE if is_online else OFFLINE,
            raw_title=fallback_text,
        )

    def check_stream_connection(self, stream: StreamConfig) -> bool:
        """HEAD the stream URL and report whether it answered acceptably.

        Args:
            stream: Stream configuration.

        Returns:
            bool: True for 200/301/302/307, False otherwise or on any
            transport error.
        """
        if not stream.base_url:
            return False

        stream_url = stream.base_url.rstrip("/") + "/"

        try:
            response = self.http.head(
                stream_url,
                timeout=stream.connection_timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            if stream.debug:
                logger.info(f"Stream connection check - URL: {stream_url} | Status: ERROR: {e}")
            return False

        if stream.debug:
            logger.info(
                f"Stream connection check - URL: {stream_url} | "
                f"Response code: {response.status_code}"
            )

        return response.status_code in ONLINE_STATUS_CODES

    def is_stream_online(self, settings: PlayerSettings) -> bool:
        return self.get_metadata(settings).is_online

    def get_statistics(self, settings: PlayerSettings) -> Dict:
        """Summarize the stream state for the status endpoint.

        Returns:
            dict: status, listeners, current_track, stream_type, last_update.
        """
        metadata = self.get_metadata(settings)

        return {
            "status": metadata.stream_status,
            "listeners": metadata.listeners,
            "current_track": metadata.raw_title,
            "stream_type": settings.stream.stream_type,
            "last_update": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        }

    def clear_cache(self) -> int:
        """Drop all cached metadata entries."""
        return self.cache.clear_prefix(METADATA_PREFIX)
