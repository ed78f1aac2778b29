"""
Settings Store

User choices that survive between runs (currently only the selected source) live in
settings.json inside the storage directory. Unlike config.json, settings are written by artwall
itself: set() merges into what is already on disk so unrelated keys are never clobbered.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


class SettingsStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> dict:
        """Return the persisted settings. A missing or unreadable file reads as no settings."""

        try:
            with self.path.open("r") as file:
                settings = json.load(file)

        except FileNotFoundError:
            return {}

        except (OSError, json.JSONDecodeError) as error:
            logger.warning("Failed to load settings from %s: %s", self.path, error)
            return {}

        return settings if isinstance(settings, dict) else {}

    def set(self, partial: dict) -> dict:
        """Merge partial into the persisted settings and write them back. Returns the merged settings."""

        merged = {**self.get(), **partial}
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".settings-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as file:
                json.dump(merged, file, indent=2)
            os.replace(tmp_path, self.path)

        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        return merged
