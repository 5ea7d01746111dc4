"""Error taxonomy for the capture, review and commit workflow.

Every error carries a message that is safe to show the user as-is.
"""


class BrainDumpError(Exception):
    """Base class for workflow errors surfaced to the user."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NoProviderAvailable(BrainDumpError):
    """Neither a remote recorder nor a local recognizer is configured."""

    default_message = "Voice recording is not available on this device."


class RecordingStartFailed(BrainDumpError):
    """Recording could not be started under any provider."""

    default_message = "Could not start voice recording. Please try again."


class TranscriptionFailed(BrainDumpError):
    """The transcription round-trip failed. The buffer is unchanged."""

    default_message = "Could not transcribe the recording. Your text was kept."


class EmptyInput(BrainDumpError):
    """Nothing to extract."""

    default_message = "Please enter some thoughts before organizing them."


class InvalidInput(BrainDumpError):
    """Content rejected after sanitization (too short or too long)."""

    default_message = "Please enter some valid content to process."


class RateLimited(BrainDumpError):
    """Too many extraction submissions in the current window."""

    default_message = "Please wait before submitting again."

    def __init__(self, message: str | None = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class ExtractionFailed(BrainDumpError):
    """The extraction service returned a failure. Input is preserved."""

    default_message = "Processing failed. Please try again."


class NothingSelected(BrainDumpError):
    """Commit guard: empty selection or no signed-in identity."""

    default_message = "Select at least one task to save."


class CommitInProgress(BrainDumpError):
    """A commit is already in flight."""

    default_message = "Tasks are already being saved."


class CommitFailed(BrainDumpError):
    """The commit request failed. Review state is kept for a retry."""

    default_message = "Failed to save tasks. Please try again."


class HistoryFailed(BrainDumpError):
    """Listing, editing or deleting a stored dump failed."""

    default_message = "Could not reach your previous brain dumps. Please try again."
