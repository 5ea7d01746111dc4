"""Tests for plain-text review rendering."""

from datetime import datetime

from braindump.core.pipeline import Workflow
from braindump.core.render import (
    format_hours,
    format_review,
    format_task_details,
    format_task_line,
    format_time_mentions,
)
from braindump.core.times import TimeMention

from conftest import make_task


class TestFormatting:
    def test_hours(self):
        assert format_hours(2.0) == "2h"
        assert format_hours(0.25) == "0.25h"

    def test_task_line(self, sample_tasks):
        assert format_task_line(sample_tasks[0], 1, True) == "[x]  1. [!!!] Finish quarterly report (3h)"
        assert format_task_line(sample_tasks[1], 2, False) == "[ ]  2. [   ] Call dentist (0.25h)"

    def test_editing_marker(self, sample_tasks):
        assert format_task_line(sample_tasks[2], 3, True, editing=True).endswith("(editing)")

    def test_details(self):
        task = make_task("1", description="Bring receipts", tags=["tax"], micro_tasks=["Find forms"])
        lines = format_task_details(task)
        assert "      Bring receipts" in lines
        assert "      tags: tax" in lines
        assert "      - Find forms" in lines

    def test_review(self, sample_result):
        workflow = Workflow()
        ticket = workflow.begin_extraction("thoughts")
        workflow.complete_extraction(ticket, sample_result)
        workflow.review.toggle("2")

        text = format_review(workflow)
        assert text.startswith("2 of 3 tasks selected (5h)")
        assert "Finish quarterly report - Peak focus" in text
        assert "Workload: Optimal (5.25h total)" in text

    def test_time_mentions(self):
        lines = format_time_mentions([TimeMention(datetime(2025, 1, 16, 15, 0), "dentist")])
        assert lines == ['  Thu Jan 16 15:00  "dentist"']
