"""
Time parsing and local-time resolution.

Parking likelihood depends on the local hour and weekday, so every caller needs the
same rule for turning "a timestamp" into a wall-clock datetime:

- aware datetimes are instants: they are read on the explicit zone, or on the
  process's local clock when none is given;
- naive datetimes are already wall-clock values (an explicit zone is attached);
- epoch milliseconds are converted into the explicit zone, or into the process's
  local zone when none is given.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

Timestamp = datetime | int | float


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def parse_datetime(value: str, timezone: str | None = None) -> datetime:
    """Parse ISO-8601 datetime string.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive and `timezone` is given, that zone is attached;
      otherwise the naive value is returned as local wall-clock time.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if timezone:
        return ensure_tz(dt, timezone)
    return dt


def to_local_datetime(timestamp: Timestamp, timezone: str | None = None) -> datetime:
    """Resolve `timestamp` (datetime or epoch milliseconds) to a local wall-clock datetime."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            # Naive values are already wall-clock readings.
            if timezone is None:
                return timestamp
            return timestamp.replace(tzinfo=ZoneInfo(timezone))
        if timezone is None:
            # An instant: read it on the process-local clock, never at its own offset.
            return timestamp.astimezone()
        return timestamp.astimezone(ZoneInfo(timezone))

    seconds = float(timestamp) / 1000.0
    if timezone is None:
        # Process-local zone, like a device clock.
        return datetime.fromtimestamp(seconds)
    return datetime.fromtimestamp(seconds, tz=dt_timezone.utc).astimezone(ZoneInfo(timezone))
