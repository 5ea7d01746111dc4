"""File-based schedule template storage adapter."""

import json
import logging
from pathlib import Path

from braindump.core.preferences import SchedulePreferences

logger = logging.getLogger(__name__)


class FileScheduleStore:
    """
    JSON file schedule template storage.

    Implements PreferencesStore protocol.
    """

    def __init__(self, path: Path | str, timezone: str = "UTC"):
        self.path = Path(path).expanduser()
        self.timezone = timezone

    def load(self) -> SchedulePreferences:
        """Load the stored template, falling back to defaults."""
        if not self.path.exists():
            return SchedulePreferences(timezone=self.timezone)
        try:
            data = json.loads(self.path.read_text())
            return SchedulePreferences.from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable schedule template {self.path}: {e}")
            return SchedulePreferences(timezone=self.timezone)

    def save(self, preferences: SchedulePreferences) -> None:
        """Write the template."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(preferences.to_dict(), indent=2))
