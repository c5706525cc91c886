"""Identifier generation helpers."""

from __future__ import annotations

import time
import uuid


def new_id() -> str:
    """Create a UUID4-based primary key."""
    return str(uuid.uuid4())


def epoch_millis() -> int:
    return int(time.time() * 1000)


def prefixed_id(prefix: str) -> str:
    """Build ids such as ``SESSION-1718031234567`` or ``INV-1718031234567``."""
    return f"{prefix}-{epoch_millis()}"
