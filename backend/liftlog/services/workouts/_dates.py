"""Calendar-day helpers for active-on-date queries."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from liftlog.services._shared.errors import ValidationFailedError


def resolve_tz(name: str) -> tzinfo:
    """
    Return the ``tzinfo`` for an IANA zone name.

    :raises ValidationFailedError: For unknown zones.
    """
    if name.strip().upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationFailedError({"tz": [f"Unknown time zone: {name}"]}) from exc


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """
    Return the inclusive UTC bounds of the local calendar ``day`` in ``tz``.

    The upper bound is the last microsecond before the next local midnight.
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    next_start = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    end = next_start - timedelta(microseconds=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def duration_minutes(started_at: datetime, completed_at: datetime | None) -> int | None:
    """Whole minutes between start and completion, ``None`` while in progress."""
    if completed_at is None:
        return None
    return int((completed_at - started_at).total_seconds() // 60)
