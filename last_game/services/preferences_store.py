# last_game/services/preferences_store.py
"""
Provides a service for persisting the user's preferences as a JSON file.

This module acts as a small adapter to the filesystem. It loads preferences
(applying the legacy-field migrations defined on `UserPreferences`) and saves
them back with only the known fields. File I/O goes through `aiofiles` so the
event loop is never blocked.
"""

import json
from pathlib import Path

import aiofiles
import structlog
from pydantic import ValidationError

from last_game.config.settings import UserPreferences
from last_game.exceptions import PreferencesError

logger = structlog.get_logger(__name__)


class PreferencesStore:
    """Loads and saves `UserPreferences` at a fixed path."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> UserPreferences:
        """
        Loads the stored preferences, merged over the defaults.

        A missing file yields the defaults.

        Raises:
            PreferencesError: If the file exists but cannot be read or parsed.
        """
        if not self._path.exists():
            logger.debug("No preferences file; using defaults.", path=str(self._path))
            return UserPreferences()

        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                raw_text = await f.read()
        except OSError as e:
            raise PreferencesError(f"Could not read preferences from {self._path}: {e}") from e

        try:
            data = json.loads(raw_text) if raw_text.strip() else {}
            return UserPreferences.model_validate(data if isinstance(data, dict) else {})
        except (ValueError, ValidationError) as e:
            raise PreferencesError(f"Invalid preferences file {self._path}: {e}") from e

    async def save(self, preferences: UserPreferences) -> None:
        """
        Persists the known preference fields, creating the parent directory.

        Raises:
            PreferencesError: If the file cannot be written.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self._path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(preferences.to_storage(), indent=2))
        except OSError as e:
            raise PreferencesError(f"Failed to save preferences to {self._path}: {e}") from e
        logger.debug("Saved preferences.", path=str(self._path))
