"""Time helpers."""

import time
from datetime import datetime, timezone


def get_timestamp_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
