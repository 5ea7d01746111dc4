"""Audio capture interfaces for the two voice providers."""

from typing import Callable, Protocol


class AudioRecorder(Protocol):
    """Push-to-talk recorder feeding remote transcription.

    Holds the input device from start() until release().
    """

    def start(self) -> None:
        """Acquire the input device and begin capturing."""
        ...

    def finish(self) -> bytes:
        """Stop capturing and return the recording as WAV bytes."""
        ...

    def release(self) -> None:
        """Free the input device."""
        ...


class SpeechRecognizer(Protocol):
    """Continuous recognizer that reports phrases as they are recognized."""

    def start(self, on_result: Callable[[str, bool], None]) -> None:
        """Begin listening. on_result(text, is_final) is called per hypothesis."""
        ...

    def stop(self) -> None:
        """Stop listening and free the input device."""
        ...
