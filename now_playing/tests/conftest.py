"""Pytest configuration and fixtures for now_playing tests."""

import json

import httpx
import pytest

from now_playing.cache import TTLCache
from now_playing.config import PlayerSettings
from now_playing.metrics import MetricsExporter
from now_playing.tests.sample_data import FakeClock, RecordingTransport


@pytest.fixture
def clock():
    """Fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """TTL cache driven by the fake clock."""
    return TTLCache(clock=clock)


@pytest.fixture
def metrics():
    """Metrics exporter with its own registry."""
    return MetricsExporter()


@pytest.fixture
def make_client():
    """Factory for httpx clients backed by a recording mock transport."""
    clients = []

    def _make(handler):
        transport = RecordingTransport(handler)
        client = httpx.Client(transport=transport)
        clients.append(client)
        return client, transport

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def icecast_settings():
    """Icecast station settings on mount /live."""
    return PlayerSettings.from_dict(
        {
            "stream_type": "icecast",
            "stream_url": "http://radio.test:8000",
            "mount_point": "/live",
            "refresh_interval": 10,
        }
    )


@pytest.fixture
def settings_file(tmp_path):
    """Write a host options JSON file and return its path."""

    def _write(options: dict):
        path = tmp_path / "options.json"
        path.write_text(json.dumps(options), encoding="utf-8")
        return path

    return _write
