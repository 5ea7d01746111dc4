"""Plain-text rendering of review state - no I/O."""

from .history import BrainDump
from .pipeline import Workflow
from .tasks import DailySchedule, ExtractedTask, Priority, total_hours
from .times import TimeMention

PRIORITY_MARKERS = {
    Priority.URGENT: "!!!",
    Priority.HIGH: "!!",
    Priority.MEDIUM: "!",
    Priority.LOW: "",
}


def format_hours(hours: float) -> str:
    """2.0 -> "2h", 1.5 -> "1.5h"."""
    return f"{hours:g}h"


def format_task_line(task: ExtractedTask, index: int, selected: bool, editing: bool = False) -> str:
    """One review line: checkbox, number, priority, title, estimate."""
    box = "[x]" if selected else "[ ]"
    marker = PRIORITY_MARKERS[task.priority]
    suffix = "  (editing)" if editing else ""
    return f"{box} {index:>2}. [{marker:3}] {task.title} ({format_hours(task.estimated_hours)}){suffix}"


def format_task_details(task: ExtractedTask) -> list[str]:
    """Indented detail lines under a task."""
    lines = []
    if task.description:
        lines.append(f"      {task.description}")
    meta = [p for p in (task.category, task.priority.value) if p]
    if task.suggested_day or task.optimal_time_slot:
        meta.append(" ".join(p for p in (task.suggested_day, task.optimal_time_slot) if p))
    if meta:
        lines.append(f"      {' | '.join(meta)}")
    if task.tags:
        lines.append(f"      tags: {', '.join(task.tags)}")
    for step in task.micro_tasks:
        lines.append(f"      - {step}")
    return lines


def format_schedule(schedule: DailySchedule, tasks: list[ExtractedTask]) -> list[str]:
    """Daily schedule summary lines."""
    titles = {t.id: t.title for t in tasks}
    lines = [
        f"Workload: {schedule.workload_assessment.value} "
        f"({format_hours(schedule.total_estimated_hours)} total)"
    ]
    for block in schedule.time_blocks:
        title = titles.get(block.task_id, block.task_id)
        rationale = f" - {block.rationale}" if block.rationale else ""
        lines.append(f"  {block.time:13} {title}{rationale}")
    return lines


def format_review(workflow: Workflow, details: bool = False) -> str:
    """Full review listing for the current task set."""
    review = workflow.review
    hours = format_hours(total_hours(review.selected_tasks()))
    lines = [f"{len(review.selection)} of {len(review.tasks)} tasks selected ({hours})", ""]
    for i, task in enumerate(review.tasks, start=1):
        lines.append(
            format_task_line(task, i, review.is_selected(task.id), task.id == review.editing_id)
        )
        if details:
            lines.extend(format_task_details(task))
    if workflow.daily_schedule and workflow.daily_schedule.time_blocks:
        lines.append("")
        lines.extend(format_schedule(workflow.daily_schedule, review.tasks))
    return "\n".join(lines)


def format_time_mentions(mentions: list[TimeMention]) -> list[str]:
    return [f"  {m.when.strftime('%a %b %d %H:%M')}  \"{m.context}\"" for m in mentions]


def format_dump(dump: BrainDump, preview: int = 200) -> list[str]:
    """History entry: header, content preview and size."""
    when = dump.created_at.strftime("%b %d, %Y %H:%M") if dump.created_at else "unknown date"
    status = "✓ processed" if dump.processed else "unprocessed"
    text = " ".join(dump.raw_content.split())
    if len(text) > preview:
        text = text[: preview - 1] + "…"
    footer = f"{dump.char_count} characters, {dump.word_count} words"
    if dump.ai_analysis_complete:
        footer += " · analysis complete"
    return [f"[{dump.short_id}] {when}  {status}", f"    {text}", f"    {footer}"]
