"""Delayed action interface."""

from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A pending delayed action."""

    def cancel(self) -> None:
        """Disarm the action. Safe to call after it fired."""
        ...


class Timer(Protocol):
    """Interface for scheduling cancellable delayed actions."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        ...
