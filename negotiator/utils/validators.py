"""Small sanitizers used before persisting free-form text."""

from __future__ import annotations

import re

_PHONE_STRIP = re.compile(r"[\s\-().]")


def sanitize_text(value: str | None, max_len: int = 2000) -> str:
    """Sanitize free-form content before persistence."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def normalize_phone(phone_number: str) -> str:
    """Drop formatting characters so '+1 (234) 567-890' matches '+1234567890'."""
    return _PHONE_STRIP.sub("", phone_number.strip())
