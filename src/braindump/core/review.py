"""Review set: selection and inline editing over extracted tasks."""

from .tasks import ExtractedTask, Priority, coerce_hours

EDITABLE_FIELDS = ("title", "description", "priority", "estimated_hours")


class ReviewSet:
    """
    Selection/edit layer over the current extracted tasks.

    Opt-out model: a fresh task set starts fully selected. Edits apply to the
    task immediately; there is no staged copy, so leaving edit mode never
    reverts anything.
    """

    def __init__(self, tasks: list[ExtractedTask] | None = None):
        self.tasks: list[ExtractedTask] = []
        self.selection: set[str] = set()
        self.editing_id: str | None = None
        if tasks:
            self.replace(tasks)

    def replace(self, tasks: list[ExtractedTask]) -> None:
        """Swap in a new task set in full and select everything."""
        self.tasks = list(tasks)
        self.selection = {t.id for t in self.tasks}
        self.editing_id = None

    def clear(self) -> None:
        self.tasks = []
        self.selection = set()
        self.editing_id = None

    def get(self, task_id: str) -> ExtractedTask | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def is_selected(self, task_id: str) -> bool:
        return task_id in self.selection

    @property
    def all_selected(self) -> bool:
        return bool(self.tasks) and len(self.selection) == len(self.tasks)

    def toggle(self, task_id: str) -> None:
        """Flip one task's selection. Unknown ids are ignored."""
        if self.get(task_id) is None:
            return
        if task_id in self.selection:
            self.selection.discard(task_id)
        else:
            self.selection.add(task_id)

    def toggle_all(self) -> None:
        """Clear when everything is selected, otherwise select everything."""
        if len(self.selection) == len(self.tasks):
            self.selection = set()
        else:
            self.selection = {t.id for t in self.tasks}

    def edit_field(self, task_id: str, field: str, value) -> None:
        """Apply a live edit to one task."""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field {field!r} is not editable")
        task = self.get(task_id)
        if task is None:
            return

        match field:
            case "estimated_hours":
                task.estimated_hours = coerce_hours(value)
            case "priority":
                task.priority = Priority.parse(value)
            case _:
                setattr(task, field, "" if value is None else str(value))

    def begin_edit(self, task_id: str) -> None:
        """Enter edit mode for one task, leaving any other task's edit mode."""
        if self.get(task_id) is not None:
            self.editing_id = task_id

    def end_edit(self) -> None:
        """Leave edit mode. Used for both Save and Cancel."""
        self.editing_id = None

    def selected_tasks(self) -> list[ExtractedTask]:
        """Selected tasks in extraction order."""
        return [t for t in self.tasks if t.id in self.selection]
