"""Speech-to-text interface for recorded audio."""

from typing import Protocol


class Transcriber(Protocol):
    """Interface for transcribing a recorded audio blob."""

    def transcribe(self, audio: bytes, language: str = "auto") -> str:
        """Return the transcription. Raises TranscriptionFailed on failure."""
        ...
