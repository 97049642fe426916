"""Clock used for placement timestamps."""

import time
from datetime import UTC, datetime


def unix_now() -> int:
    """Return the current Unix time in whole seconds."""
    return int(time.time())


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)
