"""Functional core - pure business logic with no I/O."""

from .tasks import (
    DailySchedule,
    ExtractedTask,
    ExtractionResult,
    Priority,
    TimeBlock,
    Workload,
    coerce_hours,
    parse_extraction_response,
)
from .preferences import SchedulePreferences, ScheduleType, TimeRange, preset
from .capture import CaptureBuffer
from .review import ReviewSet
from .pipeline import CommitRequest, Phase, Workflow
from .sanitize import validate_content
from .rate_limit import RateLimiter
from .times import TimeMention, extract_times
from .history import BrainDump, DumpStatus, filter_dumps
from .render import format_review

__all__ = [
    # Tasks
    "DailySchedule",
    "ExtractedTask",
    "ExtractionResult",
    "Priority",
    "TimeBlock",
    "Workload",
    "coerce_hours",
    "parse_extraction_response",
    # Preferences
    "SchedulePreferences",
    "ScheduleType",
    "TimeRange",
    "preset",
    # Workflow
    "CaptureBuffer",
    "ReviewSet",
    "CommitRequest",
    "Phase",
    "Workflow",
    # Input
    "validate_content",
    "RateLimiter",
    "TimeMention",
    "extract_times",
    # History
    "BrainDump",
    "DumpStatus",
    "filter_dumps",
    # Rendering
    "format_review",
]
