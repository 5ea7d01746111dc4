"""Task commit interface."""

from typing import Protocol


class TaskCommitter(Protocol):
    """Interface for persisting approved tasks."""

    def commit(
        self,
        tasks: list[dict],
        daily_schedule: dict | None,
        identity: str,
        original_content: str,
    ) -> bool:
        """Save tasks in one request. Raises CommitFailed on failure."""
        ...
