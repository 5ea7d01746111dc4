"""Ports - interfaces/protocols for external dependencies."""

from .extraction_service import ExtractionService
from .task_committer import TaskCommitter
from .transcriber import Transcriber
from .audio import AudioRecorder, SpeechRecognizer
from .timer import Timer, TimerHandle
from .preferences_store import PreferencesStore
from .dump_history import DumpHistory

__all__ = [
    "ExtractionService",
    "TaskCommitter",
    "Transcriber",
    "AudioRecorder",
    "SpeechRecognizer",
    "Timer",
    "TimerHandle",
    "PreferencesStore",
    "DumpHistory",
]
