"""Schedule preference storage interface."""

from typing import Protocol

from braindump.core.preferences import SchedulePreferences


class PreferencesStore(Protocol):
    """Interface for reading and writing the user's schedule template."""

    def load(self) -> SchedulePreferences:
        """Load the stored template, or defaults if none is stored."""
        ...

    def save(self, preferences: SchedulePreferences) -> None:
        """Persist the template."""
        ...
