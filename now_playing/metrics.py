"""Prometheus metrics for the now-playing service."""

import logging
from typing import Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

logger = logging.getLogger(__name__)


class MetricsExporter:
    """Counters for cache efficiency and third-party endpoint health.

    Each exporter owns its registry so several instances (one per app or
    per test) never collide on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """Initialize Prometheus metrics.

        Args:
            registry: Registry to attach metrics to. A fresh one by default.
        """
        self.registry = registry or CollectorRegistry()

        self.cache_requests_total = Counter(
            "radio_cache_requests_total",
            "Cache lookups by cache and result",
            ["cache", "result"],  # metadata|trackinfo|lyrics, hit|miss
            registry=self.registry,
        )

        self.upstream_fetches_total = Counter(
            "radio_upstream_fetches_total",
            "Stream server fetches by provider and resulting status",
            ["provider", "status"],
            registry=self.registry,
        )

        self.lyrics_lookups_total = Counter(
            "radio_lyrics_lookups_total",
            "Uncached lyrics lookups by winning source (none when all failed)",
            ["source"],
            registry=self.registry,
        )

        self.artwork_lookups_total = Counter(
            "radio_artwork_lookups_total",
            "Uncached artwork lookups by outcome",
            ["outcome"],  # found, not_found, error
            registry=self.registry,
        )

        self.upstream_fetch_duration_seconds = Histogram(
            "radio_upstream_fetch_duration_seconds",
            "Stream server fetch duration in seconds",
            ["provider"],
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0),
            registry=self.registry,
        )

    def record_cache(self, cache: str, hit: bool) -> None:
        self.cache_requests_total.labels(cache=cache, result="hit" if hit else "miss").inc()

    def record_upstream_fetch(self, provider: str, status: str, duration_seconds: float) -> None:
        """Record one provider fetch.

        Args:
            provider: Provider name ("icecast", "shoutcast").
            status: Resulting stream status ("online" or "offline").
            duration_seconds: Wall time spent fetching.
        """
        self.upstream_fetches_total.labels(provider=provider, status=status).inc()
        self.upstream_fetch_duration_seconds.labels(provider=provider).observe(duration_seconds)
        logger.debug(f"Upstream fetch recorded: {provider} {status} {duration_seconds:.3f}s")

    def record_lyrics_lookup(self, source: str) -> None:
        self.lyrics_lookups_total.labels(source=source or "none").inc()

    def record_artwork_lookup(self, outcome: str) -> None:
        self.artwork_lookups_total.labels(outcome=outcome).inc()

    def get_metrics(self) -> bytes:
        """Generate Prometheus metrics output.

        Returns:
            Prometheus metrics in text format
        """
        return generate_latest(self.registry)

    def get_metrics_summary(self) -> Dict:
        """Cache hit/miss totals as a plain dictionary."""
        summary: Dict[str, Dict[str, float]] = {}
        for cache in ("metadata", "trackinfo", "lyrics"):
            summary[cache] = {
                result: self.registry.get_sample_value(
                    "radio_cache_requests_total", {"cache": cache, "result": result}
                )
                or 0.0
                for result in ("hit", "miss")
            }
        return summary
