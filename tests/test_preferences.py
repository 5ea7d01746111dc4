"""Tests for schedule preferences."""

import pytest

from braindump.core.preferences import (
    SchedulePreferences,
    ScheduleType,
    TimeRange,
    parse_clock,
    preset,
)


class TestParseClock:
    def test_pads_hour(self):
        assert parse_clock("9:05") == "09:05"

    @pytest.mark.parametrize("value", ["24:00", "9", "09:60", "noon"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            parse_clock(value)


class TestTimeRange:
    def test_parse(self):
        r = TimeRange.parse("9:00-11:30")
        assert (r.start, r.end) == ("09:00", "11:30")
        assert r.format() == "09:00-11:30"

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            TimeRange.parse("09:00")


class TestSchedulePreferences:
    def test_defaults(self):
        prefs = SchedulePreferences()
        assert prefs.working_hours.format() == "09:00-17:00"
        assert [r.format() for r in prefs.focus_hours] == ["09:00-11:00", "14:00-16:00"]
        assert prefs.max_tasks_per_day == 6
        assert prefs.prioritize_urgent is True

    def test_to_api(self):
        data = SchedulePreferences(timezone="Europe/Berlin").to_api()
        assert data["workingHours"] == {"start": "09:00", "end": "17:00"}
        assert data["focusHours"][1] == {"start": "14:00", "end": "16:00"}
        assert data["breakInterval"] == 90
        assert data["maxTasksPerDay"] == 6
        assert data["scheduleType"] == "traditional"
        assert data["timezone"] == "Europe/Berlin"
        assert "breakTime" not in data

    def test_break_time_included_when_set(self):
        assert SchedulePreferences(break_time="12:30").to_api()["breakTime"] == "12:30"

    def test_dict_round_trip(self):
        prefs = preset(ScheduleType.NIGHT, timezone="Asia/Tokyo")
        prefs.max_tasks_per_day = 4
        assert SchedulePreferences.from_dict(prefs.to_dict()) == prefs

    def test_from_dict_fills_missing_keys(self):
        prefs = SchedulePreferences.from_dict({"max_tasks_per_day": 3})
        assert prefs.max_tasks_per_day == 3
        assert prefs.working_hours == TimeRange("09:00", "17:00")


class TestPreset:
    def test_night_wraps_midnight(self):
        prefs = preset(ScheduleType.NIGHT)
        assert prefs.working_hours.format() == "22:00-06:00"
        assert prefs.schedule_type == ScheduleType.NIGHT

    def test_custom_starts_from_traditional(self):
        prefs = preset(ScheduleType.CUSTOM)
        assert prefs.working_hours.format() == "09:00-17:00"
        assert prefs.schedule_type == ScheduleType.CUSTOM

    def test_presets_do_not_share_ranges(self):
        a = preset(ScheduleType.EARLY)
        a.focus_hours[0].start = "06:00"
        assert preset(ScheduleType.EARLY).focus_hours[0].start == "05:30"
