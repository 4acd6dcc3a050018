from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive UTC datetime.

    Accepts a trailing ``Z`` as produced by JavaScript clients.
    """
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    parsed = datetime.fromisoformat(v)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (matches DATETIME columns).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_zone(name: str | None) -> tzinfo:
    if not name or name.strip().upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name.strip())


def utc_to_local(value: datetime, zone: tzinfo) -> datetime:
    """Naive UTC -> aware datetime in the business time zone."""
    return value.replace(tzinfo=timezone.utc).astimezone(zone)


def local_to_utc(value: datetime) -> datetime:
    """Aware local datetime -> naive UTC for persistence."""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def elapsed_hours(start: datetime, end: datetime) -> float:
    """Real elapsed hours between two instants.

    Aware values are converted to UTC first, so a DST change inside the span
    is counted.
    """
    if start.tzinfo is not None and end.tzinfo is not None:
        start, end = start.astimezone(timezone.utc), end.astimezone(timezone.utc)
    return (end - start).total_seconds() / 3600


def to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.replace(microsecond=0).isoformat()
