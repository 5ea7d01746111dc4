"""Tests for schedule template storage."""

import json

from braindump.adapters.file_schedule import FileScheduleStore
from braindump.core.preferences import SchedulePreferences, ScheduleType, preset


class TestFileScheduleStore:
    def test_missing_file_gives_defaults(self, tmp_path):
        store = FileScheduleStore(tmp_path / "schedule.json", timezone="America/Toronto")
        prefs = store.load()
        assert prefs == SchedulePreferences(timezone="America/Toronto")

    def test_save_and_load(self, tmp_path):
        store = FileScheduleStore(tmp_path / "config" / "schedule.json")
        prefs = preset(ScheduleType.EARLY, timezone="Europe/Paris")
        store.save(prefs)

        assert json.loads(store.path.read_text())["schedule_type"] == "early"
        assert store.load() == prefs

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text('{"working_hours": "whenever"}')
        assert FileScheduleStore(path).load() == SchedulePreferences()
