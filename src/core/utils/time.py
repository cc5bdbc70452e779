"""
Time-related utilities for the application.

Record timestamps are generated in UTC and serialized using ISO-8601 with
timezone information, so `created_at` values sort lexicographically in the
same order they were written.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()
