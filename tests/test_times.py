"""Tests for time-mention extraction."""

from datetime import date, datetime, time

import pytest

from braindump.core.times import extract_times, next_weekday, parse_clock_time


@pytest.fixture
def now():
    # A Wednesday
    return datetime(2025, 1, 15, 9, 30)


class TestParseClockTime:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("3pm", time(15, 0)),
            ("3:30 PM", time(15, 30)),
            ("12am", time(0, 0)),
            ("12pm", time(12, 0)),
            ("15:00", time(15, 0)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_clock_time(value) == expected

    @pytest.mark.parametrize("value", ["13pm", "25:00", "9:75", "soon"])
    def test_invalid(self, value):
        assert parse_clock_time(value) is None


class TestNextWeekday:
    def test_later_this_week(self):
        assert next_weekday(date(2025, 1, 15), "Friday") == date(2025, 1, 17)

    def test_same_day_means_next_week(self):
        assert next_weekday(date(2025, 1, 15), "wednesday") == date(2025, 1, 22)


class TestExtractTimes:
    def test_tomorrow(self, now):
        mentions = extract_times("Dentist tomorrow at 3pm, don't forget", now=now)
        assert [m.when for m in mentions] == [datetime(2025, 1, 16, 15, 0)]
        assert "Dentist tomorrow at 3pm" in mentions[0].context

    def test_explicit_dates(self, now):
        text = "Report due 1/20/2025 at 14:30 and review 2025-01-22 09:00"
        assert [m.when for m in extract_times(text, now=now)] == [
            datetime(2025, 1, 20, 14, 30),
            datetime(2025, 1, 22, 9, 0),
        ]

    def test_past_times_dropped(self, now):
        assert extract_times("standup today at 8am", now=now) == []

    def test_later_today_kept(self, now):
        assert [m.when for m in extract_times("lunch today at 1pm", now=now)] == [
            datetime(2025, 1, 15, 13, 0)
        ]

    def test_overlapping_patterns_reported_once(self, now):
        mentions = extract_times("team meeting on friday at 10am", now=now)
        assert [m.when for m in mentions] == [datetime(2025, 1, 17, 10, 0)]

    def test_unknown_day_skipped(self, now):
        assert extract_times("call on someday at 3pm", now=now) == []

    def test_invalid_calendar_date_skipped(self, now):
        assert extract_times("due 2/30/2025 at 10:00", now=now) == []

    def test_sorted_by_time(self, now):
        text = "friday at 9am, then tomorrow at 5pm"
        assert [m.when for m in extract_times(text, now=now)] == [
            datetime(2025, 1, 16, 17, 0),
            datetime(2025, 1, 17, 9, 0),
        ]

    def test_context_is_bounded(self, now):
        text = "x" * 200 + " tomorrow at 3pm " + "y" * 200
        (mention,) = extract_times(text, now=now)
        assert len(mention.context) <= len("tomorrow at 3pm") + 100
