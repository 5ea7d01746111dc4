"""Voice capture with two providers and a one-way fallback.

REMOTE records audio and sends it for transcription when recording stops.
LOCAL recognizes continuously and appends each finalized phrase as it lands.
If the remote recorder fails to start, the capture demotes itself to LOCAL
for the rest of its life and retries once.
"""

import logging
from enum import Enum

from .core.capture import CaptureBuffer
from .errors import (
    NoProviderAvailable,
    RecordingStartFailed,
    TranscriptionFailed,
)
from .ports.audio import AudioRecorder, SpeechRecognizer
from .ports.transcriber import Transcriber

logger = logging.getLogger(__name__)


class VoiceProvider(Enum):
    """Voice capture mechanism."""

    REMOTE = "remote"
    LOCAL = "local"


class VoiceState(Enum):
    IDLE = "idle"
    RECORDING = "recording"


def fallback(provider: VoiceProvider) -> VoiceProvider | None:
    """Provider to demote to when provider fails to start."""
    if provider is VoiceProvider.REMOTE:
        return VoiceProvider.LOCAL
    return None


class VoiceCapture:
    """
    Voice capture adapter feeding a CaptureBuffer.

    At most one recording is active at a time. The input device is released
    exactly once per recording, before any transcription happens.
    """

    def __init__(
        self,
        buffer: CaptureBuffer,
        recorder: AudioRecorder | None = None,
        transcriber: Transcriber | None = None,
        recognizer: SpeechRecognizer | None = None,
        preferred: VoiceProvider = VoiceProvider.REMOTE,
        language: str = "auto",
    ):
        self.buffer = buffer
        self.recorder = recorder
        self.transcriber = transcriber
        self.recognizer = recognizer
        self.preferred = preferred
        self.language = language
        self._active: VoiceProvider | None = None

    @property
    def state(self) -> VoiceState:
        return VoiceState.RECORDING if self._active else VoiceState.IDLE

    @property
    def provider(self) -> VoiceProvider | None:
        """Provider of the active recording, if any."""
        return self._active

    def available(self, provider: VoiceProvider) -> bool:
        if provider is VoiceProvider.REMOTE:
            return self.recorder is not None and self.transcriber is not None
        return self.recognizer is not None

    def start(self) -> VoiceProvider:
        """Start recording under the preferred provider, falling back once."""
        if self._active is not None:
            return self._active

        candidates = [p for p in (self.preferred, fallback(self.preferred)) if p]
        candidates += [p for p in VoiceProvider if p not in candidates]
        usable = [p for p in candidates if self.available(p)]
        if not usable:
            raise NoProviderAvailable()

        provider = usable[0]
        try:
            self._start(provider)
            return provider
        except Exception as e:
            logger.warning(f"{provider.value} recording failed to start: {e}")
            demoted = fallback(provider)
            if demoted is None or not self.available(demoted):
                raise RecordingStartFailed() from e
            self.preferred = demoted

        try:
            self._start(demoted)
        except Exception as e:
            logger.error(f"Fallback {demoted.value} recording failed to start: {e}")
            raise RecordingStartFailed() from e
        logger.info(f"Recording with {demoted.value} provider after fallback")
        return demoted

    def _start(self, provider: VoiceProvider) -> None:
        if provider is VoiceProvider.REMOTE:
            try:
                self.recorder.start()
            except Exception:
                self.recorder.release()
                raise
        else:
            self.recognizer.start(self._on_recognized)
        self._active = provider

    def _on_recognized(self, text: str, is_final: bool) -> None:
        # Interim hypotheses are never written to the buffer.
        if is_final and self._active is VoiceProvider.LOCAL:
            self.buffer.append(text)

    def stop_capture(self) -> bytes | None:
        """
        End the active recording and free the input device.

        Returns the recorded audio for REMOTE, None otherwise. Never raises
        before the device is released.
        """
        provider, self._active = self._active, None
        if provider is None:
            return None

        if provider is VoiceProvider.LOCAL:
            self.recognizer.stop()
            return None

        try:
            return self.recorder.finish()
        except Exception as e:
            logger.error(f"Failed to finish recording: {e}")
            raise TranscriptionFailed() from e
        finally:
            self.recorder.release()

    def transcribe(self, audio: bytes) -> str:
        """Transcribe audio and append it. The buffer is untouched on failure."""
        try:
            text = self.transcriber.transcribe(audio, language=self.language)
        except TranscriptionFailed:
            raise
        except Exception as e:
            logger.error(f"Transcription failed: {e}")
            raise TranscriptionFailed() from e

        if text.strip():
            self.buffer.append(text)
        return text

    def stop(self) -> str:
        """Stop recording; for REMOTE, transcribe and append. Returns the new text."""
        audio = self.stop_capture()
        if audio is None:
            return ""
        return self.transcribe(audio)
