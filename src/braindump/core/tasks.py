"""Pure task domain logic - no I/O dependencies."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Priority(Enum):
    """Task priority as assigned by extraction."""

    URGENT = "Urgent"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        """Case-insensitive lookup. Unknown values fall back to Medium."""
        if isinstance(value, Priority):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for p in cls:
                if p.value.lower() == wanted:
                    return p
        return cls.MEDIUM


class Workload(Enum):
    """Workload assessment for a day's schedule."""

    OPTIMAL = "Optimal"
    HEAVY = "Heavy"
    LIGHT = "Light"

    @classmethod
    def parse(cls, value: Any) -> "Workload":
        if isinstance(value, str):
            wanted = value.strip().lower()
            for w in cls:
                if w.value.lower() == wanted:
                    return w
        return cls.OPTIMAL


def coerce_hours(value: Any) -> float:
    """
    Coerce an hours value to a non-negative float.

    Invalid or negative input becomes 0.0 rather than being rejected.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        return 0.0
    return hours


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _micro_task_titles(value: Any) -> list[str]:
    """Flatten micro-tasks; the service sometimes sends objects with a title."""
    if not isinstance(value, list):
        return []
    titles = []
    for item in value:
        if isinstance(item, dict):
            title = item.get("title")
            if title:
                titles.append(str(title))
        elif item is not None:
            titles.append(str(item))
    return titles


@dataclass
class ExtractedTask:
    """A candidate task produced by extraction, editable during review."""

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    estimated_hours: float = 0.0
    category: str = ""
    tags: list[str] = field(default_factory=list)
    micro_tasks: list[str] = field(default_factory=list)
    optimal_time_slot: str | None = None
    energy_level: str | None = None
    focus_type: str | None = None
    suggested_day: str | None = None

    @classmethod
    def from_api(cls, data: dict, index: int = 0) -> "ExtractedTask":
        """Create ExtractedTask from an extraction response item."""
        raw_id = data.get("id")
        return cls(
            id=str(raw_id) if raw_id not in (None, "") else str(index + 1),
            title=str(data.get("title") or "Untitled task"),
            description=str(data.get("description") or ""),
            priority=Priority.parse(data.get("priority")),
            estimated_hours=coerce_hours(data.get("estimatedHours", 0)),
            category=str(data.get("category") or ""),
            tags=_string_list(data.get("tags")),
            micro_tasks=_micro_task_titles(data.get("microTasks")),
            optimal_time_slot=data.get("optimalTimeSlot"),
            energy_level=data.get("energyLevel"),
            focus_type=data.get("focusType"),
            suggested_day=data.get("suggestedDay"),
        )

    def to_api(self) -> dict:
        """Serialize back to the camelCase wire shape."""
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "estimatedHours": self.estimated_hours,
            "category": self.category,
            "tags": list(self.tags),
            "microTasks": list(self.micro_tasks),
        }
        optional = {
            "optimalTimeSlot": self.optimal_time_slot,
            "energyLevel": self.energy_level,
            "focusType": self.focus_type,
            "suggestedDay": self.suggested_day,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass
class TimeBlock:
    """A slot in the suggested daily schedule."""

    time: str
    task_id: str
    rationale: str = ""


@dataclass
class DailySchedule:
    """Schedule summary returned alongside extracted tasks. Read-only."""

    total_estimated_hours: float = 0.0
    workload_assessment: Workload = Workload.OPTIMAL
    recommended_order: list[str] = field(default_factory=list)
    time_blocks: list[TimeBlock] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict | None) -> "DailySchedule | None":
        if not isinstance(data, dict):
            return None
        blocks = [
            TimeBlock(
                time=str(b.get("time", "")),
                task_id=str(b.get("taskId", "")),
                rationale=str(b.get("rationale") or ""),
            )
            for b in data.get("timeBlocks") or []
            if isinstance(b, dict)
        ]
        return cls(
            total_estimated_hours=coerce_hours(data.get("totalEstimatedHours", 0)),
            workload_assessment=Workload.parse(data.get("workloadAssessment")),
            recommended_order=[str(i) for i in data.get("recommendedOrder") or []],
            time_blocks=blocks,
        )

    def to_api(self) -> dict:
        return {
            "totalEstimatedHours": self.total_estimated_hours,
            "workloadAssessment": self.workload_assessment.value,
            "recommendedOrder": list(self.recommended_order),
            "timeBlocks": [
                {"time": b.time, "taskId": b.task_id, "rationale": b.rationale}
                for b in self.time_blocks
            ],
        }


@dataclass
class ExtractionResult:
    """Normalized extraction response."""

    tasks: list[ExtractedTask] = field(default_factory=list)
    daily_schedule: DailySchedule | None = None

    @property
    def is_empty(self) -> bool:
        return not self.tasks


def parse_extraction_response(payload: dict) -> ExtractionResult:
    """
    Normalize an extraction response.

    Accepts `extractedTasks` or the older `tasks` key. Items that are not
    objects are skipped.
    """
    items = payload.get("extractedTasks")
    if items is None:
        items = payload.get("tasks")
    items = items if isinstance(items, list) else []

    tasks = [
        ExtractedTask.from_api(item, i)
        for i, item in enumerate(items)
        if isinstance(item, dict)
    ]
    return ExtractionResult(
        tasks=tasks,
        daily_schedule=DailySchedule.from_api(payload.get("dailySchedule")),
    )


def build_extraction_request(content: str, preferences: dict, now: datetime | None = None) -> dict:
    """Build the outbound extraction request body."""
    now = now or datetime.now().astimezone()
    return {
        "content": content,
        "timestamp": now.isoformat(),
        "preferences": preferences,
    }


def total_hours(tasks: list[ExtractedTask]) -> float:
    """Sum of estimated hours."""
    return sum(t.estimated_hours for t in tasks)
