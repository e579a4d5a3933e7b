"""Timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_timestamp(dt: datetime) -> str:
    """Format ``dt`` as ``YYYY-MM-DDTHH:MM:SS``."""
    return dt.strftime(_TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse a ``YYYY-MM-DDTHH:MM:SS`` string as a UTC time; raise ValueError if malformed."""
    return datetime.strptime(text, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def now() -> datetime:
    """Return the current local time."""
    return datetime.now()