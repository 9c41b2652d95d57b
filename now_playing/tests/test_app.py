"""Tests for the HTTP endpoints."""

from unittest.mock import Mock

import httpx
import pytest
from fastapi.testclient import TestClient

from now_playing.app import create_app
from now_playing.settings import ServiceSettings
from now_playing.settings_store import SettingsStore
from now_playing.tests.sample_data import icecast_status, itunes_body

API_TOKEN = "test-token-" + "a" * 24

STATION_OPTIONS = {
    "stream_type": "icecast",
    "stream_url": "http://radio.test:8000",
    "mount_point": "/live",
    "show_track_time": "1",
    "enable_lyrics": "1",
}


def stream_server(request):
    if request.method == "HEAD":
        return httpx.Response(200)
    return httpx.Response(
        200,
        json=icecast_status(
            {
                "listenurl": "http://radio.test:8000/live",
                "title": "Daft Punk - One More Time",
                "listeners": 42,
            }
        ),
    )


def third_party_apis(request):
    if request.url.host == "itunes.apple.com":
        return httpx.Response(200, json=itunes_body(duration_ms=320000))
    if request.url.host == "lrclib.net":
        return httpx.Response(
            200,
            json={"plainLyrics": "One more time", "syncedLyrics": "[00:01.00] One more time"},
        )
    return httpx.Response(404)


@pytest.fixture
def build_client(settings_file, make_client):
    """Factory for a TestClient over an app with mocked upstreams."""

    def _build(options=None, api_token=API_TOKEN):
        path = settings_file(STATION_OPTIONS if options is None else options)
        stream_client, stream_transport = make_client(stream_server)
        api_client, api_transport = make_client(third_party_apis)
        app = create_app(
            ServiceSettings(api_token=api_token, settings_file=path),
            settings_store=SettingsStore(path),
            stream_client=stream_client,
            api_client=api_client,
        )
        return TestClient(app), stream_transport, api_transport

    return _build


class TestMetadataEndpoint:
    """Tests for GET /metadata."""

    def test_metadata(self, build_client):
        """Test metadata enriched with artwork and duration."""
        client, _, _ = build_client()

        with client:
            response = client.get("/metadata")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["artist"] == "Daft Punk"
        assert data["title"] == "One More Time"
        assert data["listeners"] == 42
        assert data["stream_status"] == "online"
        assert data["raw_title"] == "Daft Punk - One More Time"
        assert data["artwork_url"].endswith("/300x300bb.jpg")
        assert data["duration_ms"] == 320000
        assert "error" not in data
        assert body["display"]["show_track_time"] is True
        assert body["display"]["fallback_text"] == "No track information available"

    def test_metadata_cached_and_forced(self, build_client):
        """Test polling is served from cache unless forced."""
        client, stream_transport, _ = build_client()

        with client:
            client.get("/metadata")
            client.get("/metadata")
            assert stream_transport.count("GET") == 1

            client.get("/metadata", params={"force": "true"})
            assert stream_transport.count("GET") == 2

    @pytest.mark.parametrize("force", ["abc", "1", "TRUE", ""])
    def test_force_only_on_literal_true(self, build_client, force):
        """Test any force value other than "true" is served from cache."""
        client, stream_transport, _ = build_client()

        with client:
            client.get("/metadata")
            response = client.get("/metadata", params={"force": force})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert stream_transport.count("GET") == 1

    def test_no_track_time_omits_duration(self, build_client):
        """Test duration_ms is left out unless track time display is on."""
        options = dict(STATION_OPTIONS, show_track_time="0")
        client, _, _ = build_client(options)

        with client:
            data = client.get("/metadata").json()["data"]

        assert "duration_ms" not in data
        assert "artwork_url" in data

    def test_artwork_disabled_uses_fallback_image(self, build_client):
        """Test the fallback image stands in when artwork lookups are off."""
        options = dict(
            STATION_OPTIONS,
            show_track_time="0",
            enable_external_artwork="0",
            fallback_image="https://radio.test/logo.png",
        )
        client, _, api_transport = build_client(options)

        with client:
            data = client.get("/metadata").json()["data"]

        assert data["artwork_url"] == "https://radio.test/logo.png"
        assert api_transport.count() == 0

    def test_offline_stream(self, build_client):
        """Test an unknown mount is reported as offline with an error."""
        options = dict(STATION_OPTIONS, mount_point="/missing")
        client, _, _ = build_client(options)

        with client:
            data = client.get("/metadata").json()["data"]

        assert data["stream_status"] == "offline"
        assert data["error"] == "Mount point not found"
        assert "artwork_url" not in data


class TestStatusEndpoint:
    """Tests for GET /status."""

    def test_status(self, build_client):
        """Test the status summary."""
        client, _, _ = build_client()

        with client:
            response = client.get("/status")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "online"
        assert data["listeners"] == 42
        assert data["current_track"] == "Daft Punk - One More Time"
        assert data["stream_type"] == "icecast"
        assert "last_update" in data


class TestLyricsEndpoint:
    """Tests for GET /lyrics."""

    def test_lyrics(self, build_client):
        """Test lyrics from the first provider with synced text."""
        client, _, _ = build_client()

        with client:
            params = {"artist": "Daft Punk", "title": "One More Time"}
            first = client.get("/lyrics", params=params).json()["data"]
            second = client.get("/lyrics", params=params).json()["data"]

        assert first["lyrics"] == "One more time"
        assert first["source"] == "lrclib.net"
        assert first["is_synced"] is True
        assert first["cached"] is False
        assert second["cached"] is True

    def test_lyrics_disabled(self, build_client):
        """Test the custom message is returned when lyrics are off."""
        options = dict(STATION_OPTIONS, enable_lyrics="0", custom_lyrics_message="Off")
        client, _, api_transport = build_client(options)

        with client:
            data = client.get("/lyrics", params={"artist": "A", "title": "B"}).json()["data"]

        assert data == {"lyrics": "", "source": "", "message": "Off"}
        assert api_transport.count() == 0

    def test_missing_parameters(self, build_client):
        """Test artist and title are required."""
        client, _, _ = build_client()

        with client:
            response = client.get("/lyrics", params={"artist": "A"})

        assert response.status_code == 422
        assert response.json()["success"] is False


class TestCacheClearEndpoint:
    """Tests for POST /cache/clear."""

    def test_requires_token(self, build_client):
        """Test a missing bearer token is rejected."""
        client, _, _ = build_client()

        with client:
            response = client.post("/cache/clear")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_token(self, build_client):
        """Test a wrong bearer token is rejected."""
        client, _, _ = build_client()

        with client:
            response = client.post(
                "/cache/clear", headers={"Authorization": "Bearer wrong-token"}
            )

        assert response.status_code == 401

    def test_disabled_without_configured_token(self, build_client):
        """Test the endpoint is forbidden when no token is configured."""
        client, _, _ = build_client(api_token=None)

        with client:
            response = client.post("/cache/clear", headers={"Authorization": "Bearer x"})

        assert response.status_code == 403

    def test_clears_caches(self, build_client):
        """Test a valid token clears the caches."""
        client, stream_transport, _ = build_client()

        with client:
            client.get("/metadata")
            response = client.post(
                "/cache/clear", headers={"Authorization": f"Bearer {API_TOKEN}"}
            )
            client.get("/metadata")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Cache cleared successfully"}
        assert stream_transport.count("GET") == 2


class TestServiceEndpoints:
    """Tests for root, health and metrics endpoints."""

    def test_root(self, build_client):
        """Test service information."""
        client, _, _ = build_client()

        with client:
            body = client.get("/").json()

        assert body["service"] == "now-playing"
        assert body["endpoints"]["lyrics"] == "/lyrics"

    def test_health(self, build_client):
        """Test the liveness probe."""
        client, _, _ = build_client()

        with client:
            body = client.get("/health").json()

        assert body["status"] == "healthy"

    def test_metrics(self, build_client):
        """Test Prometheus output after a request."""
        client, _, _ = build_client()

        with client:
            client.get("/metadata")
            response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "radio_upstream_fetches_total" in response.text

    def test_unhandled_error(self, build_client):
        """Test unexpected exceptions become a JSON 500."""
        client, _, _ = build_client()
        client.app.state.radio_api = Mock()
        client.app.state.radio_api.status_response.side_effect = RuntimeError("boom")
        client = TestClient(client.app, raise_server_exceptions=False)

        with client:
            response = client.get("/status")

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_shutdown_purges_cache(self, build_client):
        """Test the cache is emptied when the app stops."""
        client, _, _ = build_client()

        with client:
            client.get("/metadata")
            cache = client.app.state.cache
            assert len(cache) > 0

        assert len(cache) == 0
