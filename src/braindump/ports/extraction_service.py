"""Extraction service interface."""

from typing import Protocol

from braindump.core.preferences import SchedulePreferences
from braindump.core.tasks import ExtractionResult


class ExtractionService(Protocol):
    """Interface for turning free text into candidate tasks."""

    def extract(self, content: str, preferences: SchedulePreferences) -> ExtractionResult:
        """Extract tasks. Raises ExtractionFailed on a non-success outcome."""
        ...
