"""Shared fakes for workflow tests."""

import threading
from datetime import datetime

import pytest

from braindump.core.tasks import DailySchedule, ExtractedTask, ExtractionResult, Priority, TimeBlock


class ManualHandle:
    def __init__(self, timer, due: float, callback):
        self.timer = timer
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimer:
    """Timer whose clock only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback) -> ManualHandle:
        handle = ManualHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for handle in sorted(self.pending, key=lambda h: h.due):
            if handle.due <= self.now and not handle.cancelled:
                handle.cancelled = True
                handle.callback()


class FakeExtractor:
    """Returns queued results; optionally blocks until released."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls: list[str] = []
        self.gates: list[threading.Event] = []

    def extract(self, content, preferences):
        index = len(self.calls)
        self.calls.append(content)
        if index < len(self.gates):
            self.gates[index].wait(timeout=5)
        result = self.results[index] if index < len(self.results) else ExtractionResult()
        if isinstance(result, Exception):
            raise result
        return result


class FakeCommitter:
    def __init__(self, outcome=True):
        self.outcome = outcome
        self.calls: list[dict] = []

    def commit(self, tasks, daily_schedule, identity, original_content):
        self.calls.append(
            {
                "tasks": tasks,
                "daily_schedule": daily_schedule,
                "identity": identity,
                "original_content": original_content,
            }
        )
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def make_task(task_id: str, title: str = "", **kwargs) -> ExtractedTask:
    return ExtractedTask(id=task_id, title=title or f"Task {task_id}", **kwargs)


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 30)


@pytest.fixture
def sample_tasks():
    return [
        make_task("1", "Finish quarterly report", priority=Priority.URGENT, estimated_hours=3),
        make_task("2", "Call dentist", priority=Priority.LOW, estimated_hours=0.25),
        make_task("3", "Plan team offsite", priority=Priority.HIGH, estimated_hours=2),
    ]


@pytest.fixture
def sample_result(sample_tasks):
    return ExtractionResult(
        tasks=sample_tasks,
        daily_schedule=DailySchedule(
            total_estimated_hours=5.25,
            recommended_order=["1", "3", "2"],
            time_blocks=[
                TimeBlock(time="09:00-12:00", task_id="1", rationale="Peak focus"),
                TimeBlock(time="14:00-16:00", task_id="3"),
            ],
        ),
    )
