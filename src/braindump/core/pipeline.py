"""
Capture-review-commit workflow state machine.

Pure state transitions - callers perform the I/O and report back. Every
extraction gets a ticket from a monotonically increasing sequence; only the
newest ticket's outcome is ever applied, so a slow earlier response can never
overwrite a fresher one.

    EMPTY -> EXTRACTING -> REVIEWING -> COMMITTING -> SAVED -> EMPTY
                 ^              |
                 +--------------+  (resubmit)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from braindump.errors import CommitInProgress, EmptyInput, NothingSelected

from .review import ReviewSet
from .tasks import DailySchedule, ExtractionResult

NO_TASKS_MESSAGE = (
    "No tasks found. Try being more specific about what you need to do."
)


class Phase(Enum):
    """Where the workflow currently is."""

    EMPTY = "empty"
    EXTRACTING = "extracting"
    REVIEWING = "reviewing"
    COMMITTING = "committing"
    SAVED = "saved"


@dataclass
class CommitRequest:
    """Snapshot of everything a commit sends."""

    ticket: int
    tasks: list[dict]
    daily_schedule: dict | None
    identity: str
    original_content: str
    task_ids: list[str] = field(default_factory=list)


class Workflow:
    """Explicit workflow state; each transition is a method call."""

    def __init__(self):
        self.review = ReviewSet()
        self.daily_schedule: DailySchedule | None = None
        self.phase = Phase.EMPTY
        self.notice: str | None = None
        self.error: str | None = None
        self.saved_at: datetime | None = None
        self._seq = 0
        self._outstanding: int | None = None
        self._committing: int | None = None

    @property
    def extracting(self) -> bool:
        return self._outstanding is not None

    @property
    def committing(self) -> bool:
        # Held until the commit reports back, even if a new extraction
        # has moved the phase on in the meantime.
        return self._committing is not None

    def begin_extraction(self, content: str) -> int:
        """
        Start an extraction of content and return its ticket.

        Discards the current task set, selection, and schedule in full.
        """
        if not content.strip():
            raise EmptyInput()

        self._seq += 1
        self._outstanding = self._seq
        self.review.clear()
        self.daily_schedule = None
        self.saved_at = None
        self.notice = None
        self.error = None
        self.phase = Phase.EXTRACTING
        return self._seq

    def complete_extraction(self, ticket: int, result: ExtractionResult) -> bool:
        """Apply a result. Returns False if the ticket has been superseded."""
        if ticket != self._outstanding:
            return False

        self._outstanding = None
        self.review.replace(result.tasks)
        self.daily_schedule = result.daily_schedule

        if result.is_empty:
            self.phase = Phase.EMPTY
            self.notice = NO_TASKS_MESSAGE
        else:
            self.phase = Phase.REVIEWING
            self.notice = f"{len(result.tasks)} tasks identified"
        return True

    def fail_extraction(self, ticket: int, message: str) -> bool:
        """Record a failed extraction. Returns False for superseded tickets."""
        if ticket != self._outstanding:
            return False

        self._outstanding = None
        self.error = message
        self.phase = Phase.REVIEWING if self.review.tasks else Phase.EMPTY
        return True

    def begin_commit(self, identity: str | None, original_content: str) -> CommitRequest:
        """Snapshot the selected tasks for a commit."""
        if self.committing:
            raise CommitInProgress()
        selected = self.review.selected_tasks()
        if not selected:
            raise NothingSelected()
        if not identity:
            raise NothingSelected("Please sign in before saving tasks.")

        self.review.end_edit()
        self.phase = Phase.COMMITTING
        self._committing = self._seq
        self.error = None
        return CommitRequest(
            ticket=self._seq,
            tasks=[t.to_api() for t in selected],
            daily_schedule=self.daily_schedule.to_api() if self.daily_schedule else None,
            identity=identity,
            original_content=original_content,
            task_ids=[t.id for t in selected],
        )

    def complete_commit(self, request: CommitRequest, saved_at: datetime) -> bool:
        """
        Mark a commit saved.

        Returns True when the caller should arm the delayed clear, i.e. no new
        extraction started while the commit was in flight.
        """
        self._committing = None
        current = request.ticket == self._seq
        if current:
            self.phase = Phase.SAVED
            self.saved_at = saved_at
            self.notice = f"Saved {len(request.tasks)} tasks"
        return current

    def fail_commit(self, request: CommitRequest, message: str) -> None:
        """Leave review state intact so the user can retry."""
        self._committing = None
        if request.ticket != self._seq:
            return
        self.phase = Phase.REVIEWING
        self.error = message

    def clear_saved(self, ticket: int) -> bool:
        """End the confirmation window: drop tasks, selection, and schedule."""
        if ticket != self._seq or self.phase != Phase.SAVED:
            return False
        self.review.clear()
        self.daily_schedule = None
        self.notice = None
        self.phase = Phase.EMPTY
        return True
