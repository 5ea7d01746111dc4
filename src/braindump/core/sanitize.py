"""Input sanitization for brain-dump content."""

import re

from braindump.errors import EmptyInput, InvalidInput

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 50000


def sanitize_content(text: str) -> str:
    """Strip angle brackets, trim, and cap the length."""
    return re.sub(r"[<>]", "", text).strip()[:MAX_CONTENT_LENGTH]


def validate_content(text: str) -> str:
    """
    Sanitize content and check it is worth submitting.

    Raises EmptyInput for blank text, InvalidInput when too short.
    """
    if not text.strip():
        raise EmptyInput()

    cleaned = sanitize_content(text)
    if not cleaned:
        raise InvalidInput()
    if len(cleaned) < MIN_CONTENT_LENGTH:
        raise InvalidInput("Content is too short. Please provide more details.")
    return cleaned
