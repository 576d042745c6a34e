"""
Centralized time helpers so extraction and persistence agree on "now".
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC time with timezone awareness.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def current_year() -> int:
    """The current calendar year (UTC), upper bound for any birth year."""
    return utc_now().year
