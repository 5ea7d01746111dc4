"""Pick date/time mentions out of free text - no I/O."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
CONTEXT_CHARS = 50

_CLOCK = r"\d{1,2}:\d{2}(?:\s*[ap]m)?"
_AMPM = r"\d{1,2}(?::\d{2})?\s*[ap]m"
_DAY = r"today|tomorrow|" + "|".join(WEEKDAYS)

PATTERNS = [
    re.compile(rf"(\d{{1,2}}/\d{{1,2}}/\d{{4}})\s+(?:at\s+)?({_CLOCK})", re.IGNORECASE),
    re.compile(rf"(\d{{4}}-\d{{2}}-\d{{2}})\s+(?:at\s+)?({_CLOCK})", re.IGNORECASE),
    re.compile(rf"\b({_DAY})\s+(?:at\s+)?({_AMPM})", re.IGNORECASE),
    re.compile(rf"\b(?:meeting|call|appointment)\s+(?:on\s+)?(\w+)\s+(?:at\s+)?({_AMPM})", re.IGNORECASE),
]


@dataclass
class TimeMention:
    """A future point in time mentioned in the text."""

    when: datetime
    context: str


def parse_clock_time(value: str) -> time | None:
    """Parse "3pm", "3:30 pm", or "15:00"."""
    match = re.fullmatch(r"(\d{1,2})(?::(\d{2}))?\s*([ap]m)?", value.strip(), re.IGNORECASE)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").lower()

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def next_weekday(today: date, day_name: str) -> date:
    """Next occurrence of day_name strictly after today."""
    target = WEEKDAYS.index(day_name.lower())
    days_ahead = (target - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def _resolve_day(token: str, today: date) -> date | None:
    token = token.lower()
    if "/" in token:
        month, day, year = (int(p) for p in token.split("/"))
        try:
            return date(year, month, day)
        except ValueError:
            return None
    if "-" in token:
        try:
            return date.fromisoformat(token)
        except ValueError:
            return None
    if token == "today":
        return today
    if token == "tomorrow":
        return today + timedelta(days=1)
    if token in WEEKDAYS:
        return next_weekday(today, token)
    return None


def extract_times(text: str, now: datetime | None = None) -> list[TimeMention]:
    """
    Find future date/time mentions in text.

    Pure function - no I/O. Each mention carries up to 50 characters of
    surrounding text. Duplicate times are reported once.
    """
    now = now or datetime.now()
    found: dict[datetime, TimeMention] = {}

    for pattern in PATTERNS:
        for match in pattern.finditer(text):
            day = _resolve_day(match.group(1), now.date())
            clock = parse_clock_time(match.group(2))
            if day is None or clock is None:
                continue

            when = datetime.combine(day, clock)
            if when <= now or when in found:
                continue

            start = max(0, match.start() - CONTEXT_CHARS)
            end = min(len(text), match.end() + CONTEXT_CHARS)
            found[when] = TimeMention(when=when, context=text[start:end].strip())

    return sorted(found.values(), key=lambda m: m.when)
