# rise/utils/availability/timezones.py
"""UTC hour <-> viewer wall-clock conversion on a specific calendar date."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from dateutil import tz

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalTime:
    label: str  # "9:00 AM"
    abbrev: str  # "EDT"
    hour: int  # 0-23 wall-clock hour in the target zone
    local_date: date


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve an IANA name, falling back to UTC for unknown or empty names."""
    if not name or name.strip().upper() == "UTC":
        return tz.UTC
    zone = tz.gettz(name.strip())
    if zone is None:
        logger.warning(f"⚠️ Unknown timezone '{name}', falling back to UTC")
        return tz.UTC
    return zone


def format_clock(dt: datetime) -> str:
    """en-US 12-hour clock, e.g. ``9:00 AM``."""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def timezone_abbrev(dt: datetime) -> str:
    return dt.tzname() or "Local"


def _utc_instant(utc_hour: int, on_date: date, minute: int = 0) -> datetime:
    base = datetime(on_date.year, on_date.month, on_date.day, tzinfo=tz.UTC)
    # hour 24 is the end of the last slot: midnight of the following day
    return base + timedelta(hours=utc_hour, minutes=minute)


def convert_utc_hour_to_local(
    utc_hour: int, on_date: date, target_timezone: str, minute: int = 0
) -> LocalTime:
    """Render ``utc_hour`` of ``on_date`` in ``target_timezone``.

    The date only selects the UTC offset in force (DST), so the same hour can
    render differently in March and in July.
    """
    local = _utc_instant(utc_hour, on_date, minute).astimezone(
        resolve_timezone(target_timezone)
    )
    return LocalTime(
        label=format_clock(local),
        abbrev=timezone_abbrev(local),
        hour=local.hour,
        local_date=local.date(),
    )


def convert_utc_range_to_local(
    start_hour: int,
    end_hour: int,
    on_date: date,
    target_timezone: str,
    start_minute: int = 0,
    end_minute: int = 0,
) -> str:
    """Convert both ends independently and join them as ``start - end ABBR``."""
    if end_hour <= start_hour:
        # "23:00 - 00:00" wraps into the next UTC day
        end_hour += 24
    start = convert_utc_hour_to_local(start_hour, on_date, target_timezone, start_minute)
    end = convert_utc_hour_to_local(end_hour, on_date, target_timezone, end_minute)
    return f"{start.label} - {end.label} {start.abbrev}"


def convert_local_hour_to_utc(
    local: Union[int, LocalTime], on_date: date, target_timezone: str
) -> Optional[int]:
    """Inverse of :func:`convert_utc_hour_to_local` over the hourly grid of ``on_date``.

    Pass the :class:`LocalTime` produced by the forward conversion to get an
    exact inverse: its calendar date and abbreviation tell apart the two
    occurrences of a wall-clock hour on DST transition days. A bare hour
    matches the first UTC hour landing on it. Returns None when no UTC hour of
    that date lands on the requested local time (the skipped hour of a
    spring-forward transition).
    """
    for utc_hour in range(24):
        candidate = convert_utc_hour_to_local(utc_hour, on_date, target_timezone)
        if isinstance(local, LocalTime):
            if (candidate.hour, candidate.local_date, candidate.abbrev) == (
                local.hour,
                local.local_date,
                local.abbrev,
            ):
                return utc_hour
        elif candidate.hour == local:
            return utc_hour
    return None


def local_now(viewer_timezone: str, now: Optional[datetime] = None) -> datetime:
    """Current wall-clock time for the viewer; ``now`` may be naive UTC or aware."""
    if now is None:
        now = datetime.now(tz.UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz.UTC)
    return now.astimezone(resolve_timezone(viewer_timezone))
