"""Service-level settings loaded from environment variables."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class ServiceSettings(BaseSettings):
    """Settings for the HTTP service itself (not the station)."""

    # Application
    app_name: str = "Now Playing Service"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 9100

    # Security
    api_token: Optional[str] = None

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"
    log_path: Optional[Path] = None
    json_logs: bool = False

    # Station settings store (JSON file of host options). Env vars when unset.
    settings_file: Optional[Path] = None

    # Outbound HTTP
    user_agent: str = "NowPlayingService/1.0"

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
