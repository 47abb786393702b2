"""Timezone resolution and timestamp formatting for human-readable output."""

import zoneinfo
from datetime import datetime, timezone, tzinfo

_UTC = timezone.utc


def resolve_timezone(name: str | None = None) -> tzinfo:
    """Return the configured IANA zone, or the system's local zone when unset."""
    if name:
        return zoneinfo.ZoneInfo(name)
    local = datetime.now().astimezone().tzinfo
    return local if local is not None else _UTC


def convert_to_local(dt: datetime, tz: tzinfo) -> datetime:
    """Convert a datetime (assumed UTC if naive) to the given timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_UTC)
    return dt.astimezone(tz)


def format_local_time(dt: datetime, tz: tzinfo) -> str:
    return convert_to_local(dt, tz).strftime("%Y-%m-%d %H:%M")


def format_local_date(dt: datetime, tz: tzinfo) -> str:
    return convert_to_local(dt, tz).strftime("%Y-%m-%d")
