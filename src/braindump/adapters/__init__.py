"""Adapters - I/O implementations of ports."""

from .brain_dump_api import BrainDumpAPIAdapter, AuthenticationError
from .transcription_api import TranscriptionAPIAdapter
from .microphone import MicrophoneRecorder
from .speech_recognizer import ContinuousSpeechRecognizer
from .scheduler_timer import SchedulerTimer
from .file_schedule import FileScheduleStore

__all__ = [
    "BrainDumpAPIAdapter",
    "AuthenticationError",
    "TranscriptionAPIAdapter",
    "MicrophoneRecorder",
    "ContinuousSpeechRecognizer",
    "SchedulerTimer",
    "FileScheduleStore",
]
