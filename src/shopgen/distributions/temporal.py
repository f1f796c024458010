"""Temporal helpers.

Timestamps travel through the text files as UTC ISO-8601 strings with
millisecond precision and a trailing ``Z``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

ISO_FORMAT_SUFFIX = "Z"


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Example:
        >>> format_timestamp(datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc))
        '2024-03-01T12:30:45.123Z'
    """
    utc = ensure_utc(value)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}" + ISO_FORMAT_SUFFIX


def add_days(value: datetime, days: int) -> datetime:
    """Shift a timestamp by whole days (UTC, no DST)."""
    return value + timedelta(days=days)
