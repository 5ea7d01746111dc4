"""Capture buffer: typed and transcribed text plus local autosave bookkeeping."""

from datetime import datetime
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from braindump.ports.timer import Timer, TimerHandle

AUTOSAVE_DELAY = 2.0


class CaptureBuffer:
    """
    Accumulated brain-dump text.

    Keyboard edits replace the text, finalized voice segments append to it.
    Each mutation re-arms a debounced autosave; the save timestamp only moves
    once the buffer has been non-empty and untouched for the full delay.
    Autosave is local bookkeeping, nothing is sent anywhere.
    """

    def __init__(
        self,
        timer: "Timer",
        autosave_delay: float = AUTOSAVE_DELAY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._timer = timer
        self._clock = clock
        self.autosave_delay = autosave_delay
        self.text = ""
        self.last_saved_at: datetime | None = None
        self._pending: "TimerHandle | None" = None

    def set_text(self, text: str) -> None:
        """Replace the whole buffer (keyboard edit)."""
        self.text = text
        self._rearm()

    def append(self, segment: str) -> None:
        """Append a finalized transcription segment."""
        segment = segment.strip()
        if not segment:
            return
        if self.text and not self.text[-1].isspace():
            self.text += " "
        self.text += segment
        self._rearm()

    def snapshot(self) -> str:
        """Content as of now, for submission."""
        return self.text

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def autosave_pending(self) -> bool:
        return self._pending is not None

    def close(self) -> None:
        """Disarm any pending autosave."""
        self._disarm()

    def _disarm(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _rearm(self) -> None:
        self._disarm()
        if self.is_empty:
            return
        self._pending = self._timer.call_later(self.autosave_delay, self._mark_saved)

    def _mark_saved(self) -> None:
        self._pending = None
        self.last_saved_at = self._clock()
