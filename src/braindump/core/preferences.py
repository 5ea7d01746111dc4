"""Schedule preferences sent with every extraction request."""

import re
from dataclasses import dataclass, field, replace
from enum import Enum

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_clock(value: str) -> str:
    """Validate and normalize an HH:MM string."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


class ScheduleType(Enum):
    """Work rhythm the user follows."""

    TRADITIONAL = "traditional"
    NIGHT = "night"
    EVENING = "evening"
    EARLY = "early"
    CUSTOM = "custom"


@dataclass
class TimeRange:
    """A clock-time range within a day. May wrap past midnight."""

    start: str
    end: str

    def __post_init__(self):
        self.start = parse_clock(self.start)
        self.end = parse_clock(self.end)

    @classmethod
    def parse(cls, value: str) -> "TimeRange":
        """Parse "09:00-11:00"."""
        start, sep, end = value.partition("-")
        if not sep:
            raise ValueError(f"Invalid time range {value!r}, expected HH:MM-HH:MM")
        return cls(start, end)

    def format(self) -> str:
        return f"{self.start}-{self.end}"

    def to_api(self) -> dict:
        return {"start": self.start, "end": self.end}


# Working hours share the range shape.
WorkingHours = TimeRange


@dataclass
class SchedulePreferences:
    """Preferences block for extraction."""

    working_hours: TimeRange = field(default_factory=lambda: TimeRange("09:00", "17:00"))
    focus_hours: list[TimeRange] = field(
        default_factory=lambda: [TimeRange("09:00", "11:00"), TimeRange("14:00", "16:00")]
    )
    break_interval: int = 90
    max_tasks_per_day: int = 6
    prioritize_urgent: bool = True
    schedule_type: ScheduleType = ScheduleType.TRADITIONAL
    break_time: str | None = None
    timezone: str = "UTC"

    def to_api(self) -> dict:
        """Serialize to the wire `preferences` block."""
        data = {
            "workingHours": self.working_hours.to_api(),
            "focusHours": [r.to_api() for r in self.focus_hours],
            "breakInterval": self.break_interval,
            "maxTasksPerDay": self.max_tasks_per_day,
            "prioritizeUrgent": self.prioritize_urgent,
            "scheduleType": self.schedule_type.value,
            "timezone": self.timezone,
        }
        if self.break_time:
            data["breakTime"] = self.break_time
        return data

    def to_dict(self) -> dict:
        """Serialize for the stored preference record."""
        return {
            "working_hours": self.working_hours.format(),
            "focus_hours": [r.format() for r in self.focus_hours],
            "break_interval": self.break_interval,
            "max_tasks_per_day": self.max_tasks_per_day,
            "prioritize_urgent": self.prioritize_urgent,
            "schedule_type": self.schedule_type.value,
            "break_time": self.break_time,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchedulePreferences":
        """Load from the stored record. Missing keys take defaults."""
        defaults = cls()
        return cls(
            working_hours=(
                TimeRange.parse(data["working_hours"])
                if data.get("working_hours")
                else defaults.working_hours
            ),
            focus_hours=(
                [TimeRange.parse(r) for r in data["focus_hours"]]
                if "focus_hours" in data
                else defaults.focus_hours
            ),
            break_interval=int(data.get("break_interval", defaults.break_interval)),
            max_tasks_per_day=int(data.get("max_tasks_per_day", defaults.max_tasks_per_day)),
            prioritize_urgent=bool(data.get("prioritize_urgent", defaults.prioritize_urgent)),
            schedule_type=ScheduleType(data.get("schedule_type", defaults.schedule_type.value)),
            break_time=data.get("break_time") or None,
            timezone=data.get("timezone") or defaults.timezone,
        )


_PRESETS = {
    ScheduleType.TRADITIONAL: (
        TimeRange("09:00", "17:00"),
        [TimeRange("09:00", "11:00"), TimeRange("14:00", "16:00")],
        "12:00",
    ),
    ScheduleType.NIGHT: (
        TimeRange("22:00", "06:00"),
        [TimeRange("23:00", "01:00"), TimeRange("03:00", "05:00")],
        "02:00",
    ),
    ScheduleType.EVENING: (
        TimeRange("16:00", "00:00"),
        [TimeRange("17:00", "19:00"), TimeRange("21:00", "23:00")],
        "20:00",
    ),
    ScheduleType.EARLY: (
        TimeRange("05:00", "13:00"),
        [TimeRange("05:30", "07:30"), TimeRange("09:00", "11:00")],
        "08:00",
    ),
}


def preset(schedule_type: ScheduleType, timezone: str = "UTC") -> SchedulePreferences:
    """Built-in template for a schedule type. Custom starts from traditional."""
    key = schedule_type if schedule_type in _PRESETS else ScheduleType.TRADITIONAL
    working, focus, break_time = _PRESETS[key]
    return SchedulePreferences(
        working_hours=replace(working),
        focus_hours=[replace(r) for r in focus],
        break_time=break_time,
        schedule_type=schedule_type,
        timezone=timezone,
    )
