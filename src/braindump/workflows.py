"""Shared workflow layer between the CLI and Telegram.

BrainDumpSession owns one capture-review-commit workflow: the capture
buffer, voice capture, review set, and the extraction/commit round-trips.
Blocking port calls run in worker threads so the event loop stays free; each
operation snapshots its inputs before the first await.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable

from .adapters.brain_dump_api import BrainDumpAPIAdapter
from .adapters.file_schedule import FileScheduleStore
from .adapters.microphone import MicrophoneRecorder
from .adapters.speech_recognizer import ContinuousSpeechRecognizer
from .adapters.transcription_api import TranscriptionAPIAdapter
from .config import SCHEDULE_FILE, Config, Tokens
from .core.capture import AUTOSAVE_DELAY, CaptureBuffer
from .core.pipeline import Phase, Workflow
from .core.preferences import SchedulePreferences
from .core.rate_limit import RateLimiter
from .core.review import ReviewSet
from .core.sanitize import validate_content
from .core.tasks import DailySchedule, ExtractionResult
from .core.times import TimeMention, extract_times
from .errors import (
    BrainDumpError,
    CommitFailed,
    ExtractionFailed,
    RateLimited,
    TranscriptionFailed,
)
from .ports.audio import AudioRecorder, SpeechRecognizer
from .ports.extraction_service import ExtractionService
from .ports.dump_history import DumpHistory
from .ports.preferences_store import PreferencesStore
from .ports.task_committer import TaskCommitter
from .ports.timer import Timer, TimerHandle
from .ports.transcriber import Transcriber
from .voice import VoiceCapture, VoiceProvider

logger = logging.getLogger(__name__)

CLEAR_DELAY = 3.0


class BrainDumpSession:
    """One brain-dump screen's worth of state and actions."""

    def __init__(
        self,
        extractor: ExtractionService,
        committer: TaskCommitter,
        timer: Timer,
        preferences: SchedulePreferences | None = None,
        identity: str | None = None,
        recorder: AudioRecorder | None = None,
        transcriber: Transcriber | None = None,
        recognizer: SpeechRecognizer | None = None,
        voice_provider: VoiceProvider = VoiceProvider.REMOTE,
        language: str = "auto",
        rate_limiter: RateLimiter | None = None,
        autosave_delay: float = AUTOSAVE_DELAY,
        clear_delay: float = CLEAR_DELAY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.extractor = extractor
        self.committer = committer
        self.timer = timer
        self.preferences = preferences or SchedulePreferences()
        self.identity = identity
        self.rate_limiter = rate_limiter
        self.clear_delay = clear_delay
        self._clock = clock
        self._clear_handle: TimerHandle | None = None

        self.buffer = CaptureBuffer(timer, autosave_delay=autosave_delay, clock=clock)
        self.workflow = Workflow()
        self.voice = VoiceCapture(
            self.buffer,
            recorder=recorder,
            transcriber=transcriber,
            recognizer=recognizer,
            preferred=voice_provider,
            language=language,
        )

    # ---- views ----

    @property
    def review(self) -> ReviewSet:
        return self.workflow.review

    @property
    def daily_schedule(self) -> DailySchedule | None:
        return self.workflow.daily_schedule

    @property
    def phase(self) -> Phase:
        return self.workflow.phase

    @property
    def recording(self) -> bool:
        return self.voice.provider is not None

    def time_mentions(self, now: datetime | None = None) -> list[TimeMention]:
        """Future times mentioned in the buffer."""
        return extract_times(self.buffer.text, now=now or self._clock())

    # ---- capture ----

    def set_text(self, text: str) -> None:
        self.buffer.set_text(text)

    def append_text(self, text: str) -> None:
        self.buffer.append(text)

    def start_recording(self) -> VoiceProvider:
        """Start voice capture. See VoiceCapture.start for fallback rules."""
        return self.voice.start()

    async def stop_recording(self) -> str:
        """
        Stop voice capture.

        The input device is freed before this first suspends; the remote
        transcription round-trip happens afterwards.
        """
        audio = self.voice.stop_capture()
        if audio is None:
            return ""
        return await asyncio.to_thread(self.voice.transcribe, audio)

    async def add_recording(self, audio: bytes) -> str:
        """Transcribe a clip recorded elsewhere and append it to the buffer."""
        return await asyncio.to_thread(self.voice.transcribe, audio)

    # ---- extraction ----

    async def extract(self) -> ExtractionResult | None:
        """
        Submit the buffer for extraction.

        Returns the applied result, or None when a newer submission superseded
        this one. The buffer is never modified.
        """
        content = validate_content(self.buffer.snapshot())

        if self.rate_limiter is not None:
            decision = self.rate_limiter.check(self.identity or "anonymous")
            if not decision.allowed:
                logger.warning(f"Extraction rate limit hit for {self.identity or 'anonymous'}")
                raise RateLimited(decision.reason, retry_after=decision.retry_after)

        self._cancel_clear()
        ticket = self.workflow.begin_extraction(content)
        logger.info(f"Extraction #{ticket} submitted ({len(content)} chars)")

        try:
            result = await asyncio.to_thread(self.extractor.extract, content, self.preferences)
        except Exception as e:
            message = e.message if isinstance(e, BrainDumpError) else ExtractionFailed.default_message
            if not self.workflow.fail_extraction(ticket, message):
                logger.debug(f"Ignoring failure of superseded extraction #{ticket}: {e}")
                return None
            logger.error(f"Extraction #{ticket} failed: {e}")
            if isinstance(e, ExtractionFailed):
                raise
            raise ExtractionFailed(message) from e

        if not self.workflow.complete_extraction(ticket, result):
            logger.debug(f"Discarding superseded extraction #{ticket}")
            return None
        return result

    # ---- commit ----

    async def commit(self) -> bool:
        """Save the selected tasks, then clear the review after a short delay."""
        request = self.workflow.begin_commit(self.identity, self.buffer.snapshot())
        logger.info(f"Committing {len(request.tasks)} tasks")

        try:
            saved = await asyncio.to_thread(
                self.committer.commit,
                request.tasks,
                request.daily_schedule,
                request.identity,
                request.original_content,
            )
            if saved is False:
                raise CommitFailed()
        except Exception as e:
            message = e.message if isinstance(e, BrainDumpError) else CommitFailed.default_message
            self.workflow.fail_commit(request, message)
            logger.error(f"Commit failed: {e}")
            if isinstance(e, CommitFailed):
                raise
            raise CommitFailed(message) from e

        if self.workflow.complete_commit(request, self._clock()):
            self._cancel_clear()
            self._clear_handle = self.timer.call_later(
                self.clear_delay, lambda: self._clear_saved(request.ticket)
            )
        return True

    def _clear_saved(self, ticket: int) -> None:
        self._clear_handle = None
        self.workflow.clear_saved(ticket)

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None

    def close(self) -> None:
        """Release the microphone and disarm pending timers."""
        try:
            self.voice.stop_capture()
        except TranscriptionFailed as e:
            logger.warning(f"Discarded unfinished recording: {e}")
        self._cancel_clear()
        self.buffer.close()


def get_schedule_store(config: Config) -> PreferencesStore:
    """Schedule template store for this installation."""
    return FileScheduleStore(SCHEDULE_FILE, timezone=config.timezone)


def get_dump_history(config: Config, tokens: Tokens | None = None) -> DumpHistory:
    """Previously submitted dumps for the signed-in user."""
    return BrainDumpAPIAdapter(config, tokens or Tokens.load())


def build_session(
    config: Config,
    timer: Timer,
    tokens: Tokens | None = None,
    voice: bool = True,
) -> BrainDumpSession:
    """
    Wire a session to the HTTP API and the stored schedule template.

    The microphone and local recognizer are only attached when voice is set;
    the bot receives recorded voice notes instead.
    """
    tokens = tokens or Tokens.load()
    api = BrainDumpAPIAdapter(config, tokens)
    return BrainDumpSession(
        extractor=api,
        committer=api,
        timer=timer,
        preferences=get_schedule_store(config).load(),
        identity=api.identity,
        recorder=MicrophoneRecorder() if voice else None,
        transcriber=TranscriptionAPIAdapter(config, tokens, auth=api),
        recognizer=ContinuousSpeechRecognizer(config.speech_locale) if voice else None,
        voice_provider=VoiceProvider(config.voice_provider),
        language=config.transcription_language,
        rate_limiter=RateLimiter(max_attempts=config.rate_limit_per_minute),
        autosave_delay=config.autosave_delay,
        clear_delay=config.clear_delay,
    )
