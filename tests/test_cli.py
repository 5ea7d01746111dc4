"""Tests for the CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from braindump.adapters.file_schedule import FileScheduleStore
from braindump.cli import main
from braindump.config import Config
from braindump.core.history import BrainDump
from braindump.core.tasks import ExtractionResult
from braindump.errors import HistoryFailed
from braindump.workflows import BrainDumpSession

from conftest import FakeCommitter, FakeExtractor

CONTENT = "Finish the quarterly report and call the dentist"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def committer():
    return FakeCommitter()


@pytest.fixture
def fake_build(sample_result, committer):
    """Patch session wiring so commands run against fakes."""

    def build(config, timer, tokens=None, voice=True):
        return BrainDumpSession(
            FakeExtractor([sample_result]), committer, timer, identity="user-1"
        )

    with patch("braindump.cli.load_config", return_value=Config()), patch(
        "braindump.cli.build_session", side_effect=build
    ):
        yield


class TestExtract:
    def test_json_output(self, runner, fake_build):
        result = runner.invoke(main, ["extract", "--json"], input=CONTENT)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [t["id"] for t in data["tasks"]] == ["1", "2", "3"]
        assert data["dailySchedule"]["totalEstimatedHours"] == 5.25

    def test_text_output(self, runner, fake_build):
        result = runner.invoke(main, ["extract"], input=CONTENT)
        assert result.exit_code == 0
        assert "3 of 3 tasks selected (5.25h)" in result.output
        assert "Finish quarterly report" in result.output
        assert "Plan team offsite" in result.output
        assert "tasks identified" not in result.output

    def test_text_output_when_nothing_found(self, runner):
        def build(config, timer, tokens=None, voice=True):
            return BrainDumpSession(
                FakeExtractor([ExtractionResult()]), FakeCommitter(), timer, identity="user-1"
            )

        with patch("braindump.cli.load_config", return_value=Config()), patch(
            "braindump.cli.build_session", side_effect=build
        ):
            result = runner.invoke(main, ["extract"], input=CONTENT)
        assert result.exit_code == 0
        assert result.output.startswith("No tasks found")

    def test_too_short(self, runner, fake_build):
        result = runner.invoke(main, ["extract"], input="hi")
        assert result.exit_code == 1
        assert "too short" in result.output


class TestDump:
    def test_review_and_save(self, runner, fake_build, committer, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text(CONTENT)

        result = runner.invoke(main, ["dump", "--file", str(notes)], input="p\n2\ns\n")

        assert result.exit_code == 0, result.output
        assert "✓ Saved 2 tasks" in result.output
        assert [t["id"] for t in committer.calls[0]["tasks"]] == ["1", "3"]
        assert committer.calls[0]["original_content"] == CONTENT

    def test_quit_without_saving(self, runner, fake_build, committer, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text(CONTENT)
        result = runner.invoke(main, ["dump", "--file", str(notes)], input="p\nq\n")
        assert result.exit_code == 0
        assert committer.calls == []

    def test_edit_task(self, runner, fake_build, committer, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text(CONTENT)
        result = runner.invoke(
            main,
            ["dump", "--file", str(notes)],
            input="p\ne 2\nCall the dentist today\n\nHigh\nabc\ns\n",
        )
        assert result.exit_code == 0, result.output
        saved = {t["id"]: t for t in committer.calls[0]["tasks"]}
        assert saved["2"]["title"] == "Call the dentist today"
        assert saved["2"]["priority"] == "High"
        assert saved["2"]["estimatedHours"] == 0.0


class TestPreferences:
    @pytest.fixture
    def store(self, tmp_path):
        store = FileScheduleStore(tmp_path / "schedule.json")
        with patch("braindump.cli.load_config", return_value=Config()), patch(
            "braindump.cli.get_schedule_store", return_value=store
        ):
            yield store

    def test_set(self, runner, store):
        result = runner.invoke(
            main,
            ["preferences", "set", "--working-hours", "08:00-16:00", "--max-tasks", "4", "--no-prioritize-urgent"],
        )
        assert result.exit_code == 0, result.output
        prefs = store.load()
        assert prefs.working_hours.format() == "08:00-16:00"
        assert prefs.max_tasks_per_day == 4
        assert prefs.prioritize_urgent is False
        assert prefs.schedule_type.value == "custom"

    def test_set_rejects_bad_range(self, runner, store):
        result = runner.invoke(main, ["preferences", "set", "--working-hours", "8-4"])
        assert result.exit_code == 1
        assert not store.path.exists()

    def test_preset_keeps_limits(self, runner, store):
        runner.invoke(main, ["preferences", "set", "--max-tasks", "3"])
        result = runner.invoke(main, ["preferences", "preset", "night"])
        assert result.exit_code == 0
        prefs = store.load()
        assert prefs.working_hours.format() == "22:00-06:00"
        assert prefs.max_tasks_per_day == 3

    def test_show_json(self, runner, store):
        result = runner.invoke(main, ["preferences", "show", "--json"])
        assert json.loads(result.output)["working_hours"] == "09:00-17:00"


class TestHistory:
    @pytest.fixture
    def store(self):
        store = MagicMock()
        store.list_dumps.return_value = [
            BrainDump("a1b2c3d4-0001", "Call the dentist and renew passport", processed=True),
            BrainDump("f00dcafe-0002", "Plan the team offsite", processed=False),
        ]
        with patch("braindump.cli.load_config", return_value=Config()), patch(
            "braindump.cli.get_dump_history", return_value=store
        ):
            yield store

    def test_list(self, runner, store):
        result = runner.invoke(main, ["history"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("2 dumps")
        assert "[a1b2c3d4]" in result.output
        assert "[f00dcafe]" in result.output

    def test_search_and_status(self, runner, store):
        result = runner.invoke(main, ["history", "--search", "DENTIST", "--processed"])
        assert "[a1b2c3d4]" in result.output
        assert "[f00dcafe]" not in result.output

        result = runner.invoke(main, ["history", "--search", "dentist", "--unprocessed"])
        assert "No brain dumps found matching your search" in result.output

    def test_json(self, runner, store):
        result = runner.invoke(main, ["history", "--json", "--unprocessed"])
        assert [d["id"] for d in json.loads(result.output)] == ["f00dcafe-0002"]

    def test_empty(self, runner, store):
        store.list_dumps.return_value = []
        result = runner.invoke(main, ["history"])
        assert "No brain dumps yet" in result.output

    def test_list_failure(self, runner, store):
        store.list_dumps.side_effect = HistoryFailed("Not signed in. Run 'braindump login' first.")
        result = runner.invoke(main, ["history"])
        assert result.exit_code == 1
        assert "Not signed in" in result.output

    def test_edit(self, runner, store):
        store.update_dump.return_value = BrainDump("f00dcafe-0002", "Plan the team offsite for March")
        with patch("braindump.cli.click.edit", return_value="Plan the team offsite for March\n"):
            result = runner.invoke(main, ["history", "edit", "f00d"])
        assert result.exit_code == 0, result.output
        store.update_dump.assert_called_once_with("f00dcafe-0002", "Plan the team offsite for March")
        assert "✓ Updated f00dcafe" in result.output

    def test_edit_unchanged(self, runner, store):
        with patch("braindump.cli.click.edit", return_value="Plan the team offsite\n"):
            result = runner.invoke(main, ["history", "edit", "f00d"])
        assert "No changes." in result.output
        store.update_dump.assert_not_called()

    def test_edit_unknown_id(self, runner, store):
        result = runner.invoke(main, ["history", "edit", "zzz"])
        assert result.exit_code == 1
        assert "No brain dump matches zzz" in result.output

    def test_delete_asks_first(self, runner, store):
        result = runner.invoke(main, ["history", "delete", "a1b2"], input="n\n")
        assert result.exit_code == 0
        assert "Kept." in result.output
        store.delete_dump.assert_not_called()

        result = runner.invoke(main, ["history", "delete", "a1b2"], input="y\n")
        assert result.exit_code == 0, result.output
        store.delete_dump.assert_called_once_with("a1b2c3d4-0001")
        assert "✓ Deleted a1b2c3d4" in result.output

    def test_delete_yes(self, runner, store):
        result = runner.invoke(main, ["history", "delete", "--yes", "f00dcafe-0002"])
        assert result.exit_code == 0
        store.delete_dump.assert_called_once_with("f00dcafe-0002")
