"""Read-only access to the station settings owned by the host.

Settings come from a JSON file of host options (reloaded when the file
changes) or, without a file, from environment variables read once.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Optional

from .config import PlayerSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    """Hands out the current PlayerSettings for each request."""

    def __init__(self, settings_file: Optional[Path] = None):
        """Initialize settings store.

        Args:
            settings_file: JSON file with the host's option dictionary.
                Environment variables are used when None.
        """
        self.settings_file = Path(settings_file) if settings_file else None
        self._lock = Lock()
        self._current: Optional[PlayerSettings] = None
        self._loaded_mtime: Optional[float] = None

    def get(self) -> PlayerSettings:
        """Return current settings, reloading the file if it changed.

        A file that fails to load or validate keeps the last good settings
        (or the defaults if there never were any).
        """
        with self._lock:
            if self.settings_file is None:
                if self._current is None:
                    self._current = self._validated(PlayerSettings.from_env())
                return self._current

            try:
                mtime = self.settings_file.stat().st_mtime
            except OSError as e:
                if self._current is None:
                    logger.warning(f"Settings file unavailable ({e}), using defaults")
                    self._current = PlayerSettings()
                return self._current

            if self._current is None or mtime != self._loaded_mtime:
                self._reload(mtime)

            return self._current

    def _reload(self, mtime: float) -> None:
        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                options = json.load(f)
            settings = PlayerSettings.from_dict(options)
            settings.validate()
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to load settings from {self.settings_file}: {e}")
            if self._current is None:
                self._current = PlayerSettings()
            self._loaded_mtime = mtime
            return

        if self._current is not None and settings != self._current:
            logger.info("Station settings changed, reloaded from file")
        self._current = settings
        self._loaded_mtime = mtime

    @staticmethod
    def _validated(settings: PlayerSettings) -> PlayerSettings:
        try:
            settings.validate()
        except ValueError as e:
            logger.error(f"Invalid station settings in environment: {e}; using defaults")
            return PlayerSettings()
        return settings
