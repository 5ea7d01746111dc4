"""Braindump CLI - capture thoughts, review extracted tasks, save them."""

import asyncio
import json
import sys
from contextlib import contextmanager
from pathlib import Path

import click

from .adapters.brain_dump_api import AuthenticationError, login as api_login
from .adapters.scheduler_timer import SchedulerTimer
from .config import Config, load_config
from .core.history import BrainDump, DumpStatus, filter_dumps, match_dumps
from .core.preferences import ScheduleType, TimeRange, parse_clock, preset
from .core.render import format_dump, format_review, format_time_mentions
from .core.sanitize import validate_content
from .core.tasks import Priority
from .errors import BrainDumpError, HistoryFailed
from .workflows import BrainDumpSession, build_session, get_dump_history, get_schedule_store


@contextmanager
def _open_session(config: Config, voice: bool = False):
    """A session whose delayed actions run on a background scheduler."""
    from apscheduler.schedulers.background import BackgroundScheduler

    scheduler = BackgroundScheduler(timezone=config.timezone or "UTC")
    scheduler.start()
    session = build_session(config, SchedulerTimer(scheduler), voice=voice)
    try:
        yield session
    finally:
        session.close()
        scheduler.shutdown(wait=False)


def _read_input(file: str | None) -> str:
    if file == "-":
        return sys.stdin.read()
    if file:
        return Path(file).read_text()
    return ""


@click.group()
@click.version_option()
def main():
    """Braindump - turn free-form thoughts into scheduled tasks."""
    pass


@main.command()
@click.option("--email", prompt=True, help="Account email")
@click.password_option(confirmation_prompt=False, help="Account password")
def login(email: str, password: str):
    """Sign in to the brain-dump service."""
    config = load_config()
    try:
        tokens = api_login(email, password, config)
    except AuthenticationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Signed in as {tokens.user_id or email}")


@main.command()
@click.option("--file", "-f", "file", default="-", help="Read thoughts from file (default: stdin)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def extract(file: str, as_json: bool):
    """Extract tasks from text without saving them."""
    config = load_config()
    text = _read_input(file)

    with _open_session(config) as session:
        session.set_text(text)
        try:
            result = asyncio.run(session.extract())
        except BrainDumpError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(1)

        if as_json:
            click.echo(
                json.dumps(
                    {
                        "tasks": [t.to_api() for t in result.tasks],
                        "dailySchedule": (
                            result.daily_schedule.to_api() if result.daily_schedule else None
                        ),
                    },
                    indent=2,
                )
            )
            return

        if result.is_empty:
            click.echo(session.workflow.notice)
            return
        click.echo(format_review(session.workflow, details=True))


@main.command()
@click.option("--file", "-f", "file", default=None, help="Start from the contents of a file")
@click.option("--voice", is_flag=True, help="Start by recording your voice")
def dump(file: str | None, voice: bool):
    """Interactive brain dump: capture, review, save."""
    config = load_config()

    with _open_session(config, voice=True) as session:
        session.set_text(_read_input(file))
        if voice:
            _record(session)

        while True:
            if not _capture_loop(session):
                return
            if _review_loop(session):
                return


def _record(session: BrainDumpSession) -> None:
    try:
        provider = session.start_recording()
    except BrainDumpError as e:
        click.echo(f"Error: {e.message}", err=True)
        return

    click.echo(f"● Recording ({provider.value}). Press Enter to stop.")
    input()
    try:
        text = asyncio.run(session.stop_recording())
    except BrainDumpError as e:
        click.echo(f"Error: {e.message}", err=True)
        return
    if text.strip():
        click.echo(f"+ {text.strip()}")


def _capture_loop(session: BrainDumpSession) -> bool:
    """Edit the buffer until it is submitted. Returns False if the user quits."""
    while True:
        buffer = session.buffer
        click.echo(f"\n{buffer.word_count} words, {buffer.char_count} characters")
        for line in format_time_mentions(session.time_mentions()):
            click.echo(line)
        choice = click.prompt(
            "[w]rite, [v]oice, [p]rocess, [q]uit",
            type=click.Choice(["w", "v", "p", "q"]),
            default="w" if buffer.is_empty else "p",
            show_choices=False,
        )

        match choice:
            case "w":
                edited = click.edit(buffer.text)
                if edited is not None:
                    session.set_text(edited.rstrip("\n"))
            case "v":
                _record(session)
            case "q":
                return False
            case "p":
                click.echo("Organizing your thoughts...")
                try:
                    result = asyncio.run(session.extract())
                except BrainDumpError as e:
                    click.echo(f"Error: {e.message}", err=True)
                    continue
                if result is None or result.is_empty:
                    click.echo(session.workflow.notice or "No tasks found.")
                    continue
                return True


def _review_loop(session: BrainDumpSession) -> bool:
    """Review extracted tasks. Returns True once saved or quit, False to re-capture."""
    review = session.review
    while True:
        click.echo()
        click.echo(format_review(session.workflow))
        command = click.prompt(
            "\n<n> toggle, [a]ll, [d]etails, [e] <n> edit, [s]ave, [r]ewrite, [q]uit",
            default="s",
        ).strip().lower()

        if command.isdigit():
            task = _task_at(session, int(command))
            if task:
                review.toggle(task.id)
            continue

        verb, _, arg = command.partition(" ")
        match verb:
            case "a":
                review.toggle_all()
            case "d":
                click.echo(format_review(session.workflow, details=True))
            case "e":
                task = _task_at(session, int(arg)) if arg.strip().isdigit() else None
                if task:
                    _edit_task(session, task.id)
                else:
                    click.echo("Usage: e <task number>", err=True)
            case "r":
                return False
            case "q":
                return True
            case "s":
                count = len(review.selection)
                try:
                    asyncio.run(session.commit())
                except BrainDumpError as e:
                    click.echo(f"Error: {e.message}", err=True)
                    continue
                click.echo(f"✓ Saved {count} tasks")
                return True
            case _:
                click.echo(f"Unknown command: {command}", err=True)


def _task_at(session: BrainDumpSession, number: int):
    tasks = session.review.tasks
    if 1 <= number <= len(tasks):
        return tasks[number - 1]
    click.echo(f"No task #{number}", err=True)
    return None


def _edit_task(session: BrainDumpSession, task_id: str) -> None:
    review = session.review
    review.begin_edit(task_id)
    task = review.get(task_id)
    try:
        review.edit_field(task_id, "title", click.prompt("Title", default=task.title))
        review.edit_field(
            task_id, "description", click.prompt("Description", default=task.description)
        )
        review.edit_field(
            task_id,
            "priority",
            click.prompt(
                "Priority",
                type=click.Choice([p.value for p in Priority], case_sensitive=False),
                default=task.priority.value,
            ),
        )
        review.edit_field(
            task_id,
            "estimated_hours",
            click.prompt("Hours", default=f"{task.estimated_hours:g}"),
        )
    finally:
        review.end_edit()


@main.group()
def preferences():
    """Show or change your schedule template."""
    pass


def _show_preferences(prefs) -> None:
    click.echo(f"Schedule type:     {prefs.schedule_type.value}")
    click.echo(f"Working hours:     {prefs.working_hours.format()}")
    click.echo(f"Focus hours:       {', '.join(r.format() for r in prefs.focus_hours) or '-'}")
    click.echo(f"Break time:        {prefs.break_time or '-'}")
    click.echo(f"Break interval:    {prefs.break_interval} min")
    click.echo(f"Max tasks per day: {prefs.max_tasks_per_day}")
    click.echo(f"Prioritize urgent: {'yes' if prefs.prioritize_urgent else 'no'}")
    click.echo(f"Timezone:          {prefs.timezone}")


@preferences.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def preferences_show(as_json: bool):
    """Show the current schedule template."""
    prefs = get_schedule_store(load_config()).load()
    if as_json:
        click.echo(json.dumps(prefs.to_dict(), indent=2))
    else:
        _show_preferences(prefs)


@preferences.command("set")
@click.option("--working-hours", help="Working hours, e.g. 09:00-17:00")
@click.option("--focus", "focus", multiple=True, help="Focus range (repeatable), e.g. 09:00-11:00")
@click.option("--break-time", help="Daily break, HH:MM")
@click.option("--break-interval", type=click.IntRange(min=15), help="Minutes between breaks")
@click.option("--max-tasks", type=click.IntRange(min=1), help="Maximum tasks per day")
@click.option("--prioritize-urgent/--no-prioritize-urgent", default=None)
@click.option("--timezone", help="IANA timezone name")
def preferences_set(
    working_hours, focus, break_time, break_interval, max_tasks, prioritize_urgent, timezone
):
    """Change individual template fields."""
    store = get_schedule_store(load_config())
    prefs = store.load()
    try:
        if working_hours:
            prefs.working_hours = TimeRange.parse(working_hours)
            prefs.schedule_type = ScheduleType.CUSTOM
        if focus:
            prefs.focus_hours = [TimeRange.parse(f) for f in focus]
            prefs.schedule_type = ScheduleType.CUSTOM
        if break_time:
            prefs.break_time = parse_clock(break_time)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if break_interval is not None:
        prefs.break_interval = break_interval
    if max_tasks is not None:
        prefs.max_tasks_per_day = max_tasks
    if prioritize_urgent is not None:
        prefs.prioritize_urgent = prioritize_urgent
    if timezone:
        prefs.timezone = timezone

    store.save(prefs)
    _show_preferences(prefs)


@preferences.command("preset")
@click.argument("schedule_type", type=click.Choice([t.value for t in ScheduleType]))
def preferences_preset(schedule_type: str):
    """Replace the template with a built-in schedule type."""
    config = load_config()
    store = get_schedule_store(config)
    current = store.load()
    prefs = preset(ScheduleType(schedule_type), timezone=current.timezone)
    prefs.break_interval = current.break_interval
    prefs.max_tasks_per_day = current.max_tasks_per_day
    prefs.prioritize_urgent = current.prioritize_urgent
    store.save(prefs)
    _show_preferences(prefs)


@main.group(invoke_without_command=True)
@click.option("--search", "-s", default="", help="Only dumps containing this text")
@click.option("--processed/--unprocessed", "processed", default=None, help="Filter by processing status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def history(ctx, search: str, processed: bool | None, as_json: bool):
    """List, edit or delete previous brain dumps."""
    if ctx.invoked_subcommand is not None:
        return

    if processed is None:
        status = DumpStatus.ALL
    else:
        status = DumpStatus.PROCESSED if processed else DumpStatus.UNPROCESSED

    try:
        dumps = get_dump_history(load_config()).list_dumps()
    except BrainDumpError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    dumps = filter_dumps(dumps, search, status)

    if as_json:
        click.echo(json.dumps([d.to_api() for d in dumps], indent=2))
        return

    if not dumps:
        click.echo("No brain dumps found matching your search" if search else "No brain dumps yet")
        return

    click.echo(f"{len(dumps)} dumps\n")
    for dump in dumps:
        for line in format_dump(dump):
            click.echo(line)
        click.echo()


def _find_dump(store, dump_id: str) -> BrainDump:
    matches = match_dumps(store.list_dumps(), dump_id)
    if not matches:
        raise HistoryFailed(f"No brain dump matches {dump_id}")
    if len(matches) > 1:
        raise HistoryFailed(f"{dump_id} matches {len(matches)} brain dumps, use a longer id")
    return matches[0]


@history.command("edit")
@click.argument("dump_id")
def history_edit(dump_id: str):
    """Edit a previous brain dump in your editor."""
    store = get_dump_history(load_config())
    try:
        dump = _find_dump(store, dump_id)
        edited = click.edit(dump.raw_content)
        if edited is None or edited.rstrip("\n") == dump.raw_content:
            click.echo("No changes.")
            return
        updated = store.update_dump(dump.id, validate_content(edited))
    except BrainDumpError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    click.echo(f"✓ Updated {updated.short_id} ({updated.word_count} words)")


@history.command("delete")
@click.argument("dump_id")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def history_delete(dump_id: str, yes: bool):
    """Delete a previous brain dump."""
    store = get_dump_history(load_config())
    try:
        dump = _find_dump(store, dump_id)
        for line in format_dump(dump):
            click.echo(line)
        if not yes and not click.confirm("Are you sure you want to delete this brain dump?"):
            click.echo("Kept.")
            return
        store.delete_dump(dump.id)
    except BrainDumpError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    click.echo(f"✓ Deleted {dump.short_id}")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    import logging

    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    try:
        from .telegram_bot import run_bot
        click.echo("Starting braindump Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo("Error: Missing dependencies. Run 'pip install python-telegram-bot apscheduler'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
