"""FastAPI application serving now-playing metadata, status and lyrics.

Route handlers are plain ``def`` functions: every upstream call is blocking
with a short timeout, so each request runs on its own worker thread.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from .api import RadioAPI
from .artwork import ArtworkService
from .auth import require_api_token
from .cache import TTLCache
from .config import PlayerSettings
from .error_handler import setup_exception_handlers
from .log_config import setup_logging
from .lyrics import LyricsResolver, default_providers
from .metrics import MetricsExporter
from .settings import ServiceSettings
from .settings_store import SettingsStore
from .stream_manager import StreamManager

logger = logging.getLogger(__name__)


def get_radio_api(request: Request) -> RadioAPI:
    return request.app.state.radio_api


def get_player_settings(request: Request) -> PlayerSettings:
    """Current station settings, read once per request."""
    return request.app.state.settings_store.get()


def create_app(
    service_settings: Optional[ServiceSettings] = None,
    settings_store: Optional[SettingsStore] = None,
    stream_client: Optional[httpx.Client] = None,
    api_client: Optional[httpx.Client] = None,
    cache: Optional[TTLCache] = None,
    configure_logging: bool = False,
) -> FastAPI:
    """Build the application and its services.

    Args:
        service_settings: Service settings. Loaded from the environment when None.
        settings_store: Station settings source. Built from
            ``service_settings.settings_file`` when None.
        stream_client: HTTP client for the streaming server. TLS verification
            is off by default since stations often run self-signed certificates.
        api_client: HTTP client for artwork and lyrics APIs.
        cache: Shared TTL cache.
        configure_logging: Install console/file log handlers.

    Returns:
        FastAPI: Configured application.
    """
    service_settings = service_settings or ServiceSettings()

    if configure_logging:
        setup_logging(
            service_settings.log_level,
            service_settings.log_path,
            service_settings.json_logs,
        )

    headers = {"User-Agent": service_settings.user_agent}
    owned_clients = []
    if stream_client is None:
        stream_client = httpx.Client(verify=False, headers=headers)
        owned_clients.append(stream_client)
    if api_client is None:
        api_client = httpx.Client(headers=headers, follow_redirects=True)
        owned_clients.append(api_client)

    cache = cache if cache is not None else TTLCache()
    metrics = MetricsExporter()
    settings_store = settings_store or SettingsStore(service_settings.settings_file)

    stream_manager = StreamManager(stream_client, cache, metrics=metrics)
    artwork_service = ArtworkService(api_client, cache, metrics=metrics)
    lyrics_resolver = LyricsResolver(
        default_providers(api_client, user_agent=service_settings.user_agent),
        cache,
        metrics=metrics,
    )
    radio_api = RadioAPI(stream_manager, artwork_service, lyrics_resolver)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown."""
        logger.info("Starting now-playing service...")
        settings = settings_store.get()
        logger.info(
            f"Station stream type: {settings.stream.stream_type}, "
            f"metadata fetch {'enabled' if settings.stream.enable_metadata_fetch else 'disabled'}"
        )

        try:
            yield
        finally:
            logger.info("Shutting down now-playing service...")
            cache.clear_all()
            for client in owned_clients:
                client.close()
            logger.info("Service shut down complete")

    app = FastAPI(
        title=service_settings.app_name,
        description="Now-playing metadata, artwork and lyrics for a live radio stream",
        version=service_settings.app_version,
        debug=service_settings.debug,
        lifespan=lifespan,
    )

    app.state.service_settings = service_settings
    app.state.settings_store = settings_store
    app.state.cache = cache
    app.state.metrics = metrics
    app.state.radio_api = radio_api

    app.add_middleware(
        CORSMiddleware,
        allow_origins=service_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    @app.get("/")
    def root():
        """Service information."""
        return {
            "service": "now-playing",
            "version": service_settings.app_version,
            "status": "running",
            "endpoints": {
                "metadata": "/metadata",
                "status": "/status",
                "lyrics": "/lyrics",
                "cache_clear": "/cache/clear",
                "health": "/health",
                "metrics": "/metrics",
            },
        }

    @app.get("/health")
    def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "service": "now-playing",
            "timestamp": datetime.now().isoformat(),
            "cache_entries": len(cache),
        }

    @app.get("/metadata")
    def get_metadata(
        force: str = Query("false", description="\"true\" bypasses the metadata cache"),
        api: RadioAPI = Depends(get_radio_api),
        settings: PlayerSettings = Depends(get_player_settings),
    ):
        """Current track, listeners and stream status with display settings."""
        return api.metadata_response(settings, force=force == "true")

    @app.get("/status")
    def get_status(
        api: RadioAPI = Depends(get_radio_api),
        settings: PlayerSettings = Depends(get_player_settings),
    ):
        """Compact stream status."""
        return api.status_response(settings)

    @app.get("/lyrics")
    def get_lyrics(
        artist: str = Query(..., description="Artist name"),
        title: str = Query(..., description="Track title"),
        api: RadioAPI = Depends(get_radio_api),
        settings: PlayerSettings = Depends(get_player_settings),
    ):
        """Lyrics for a track, synced when available."""
        return api.lyrics_response(settings, artist, title)

    @app.post("/cache/clear", dependencies=[Depends(require_api_token)])
    def clear_cache(api: RadioAPI = Depends(get_radio_api)):
        """Purge metadata, artwork and lyrics caches. Requires the API token."""
        return api.clear_cache_response()

    @app.get("/metrics")
    def get_metrics():
        """Prometheus metrics."""
        return Response(content=metrics.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    service_settings = ServiceSettings()
    uvicorn.run(
        create_app(service_settings, configure_logging=True),
        host=service_settings.host,
        port=service_settings.port,
        log_level=service_settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
