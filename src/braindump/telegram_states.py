"""Conversation states for Telegram bot."""

from enum import IntEnum, auto


class DumpStates(IntEnum):
    """States for the brain-dump conversation."""

    CAPTURE = auto()
    REVIEW = auto()
    EDIT = auto()
