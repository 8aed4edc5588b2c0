# rise/utils/availability/codec.py
"""
Flattened availability text stored in the Airtable ``Availability`` field.

A blob is a sequence of day blocks:

    Date: Monday, Jun 17
    Day: Monday
    Timezone: America/New_York
    Available Timings (Local Time):
     9:00 AM - 10:00 AM EDT (UTC: 13:00 - 14:00)

Every slot line embeds its UTC range, which is what lets a reader in another
zone re-render the same blob without loss. Decoding never raises: lines it
does not recognize are kept verbatim on the current day.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Union

from rise.models import DayAvailability, SlotLabel
from rise.utils.availability.slots import build_slot
from rise.utils.availability.timezones import convert_utc_range_to_local
from rise.utils.availability.weeks import WeekWindow, utc_today

logger = logging.getLogger(__name__)

DATE_PREFIX = "Date:"
DAY_PREFIX = "Day:"
TIMEZONE_PREFIX = "Timezone:"
TIMINGS_PREFIX = "Available Timings"
TIMINGS_HEADER = "Available Timings (Local Time):"

UTC_RANGE_RE = re.compile(r"UTC:\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})")
DISPLAY_DATE_RE = re.compile(r"(?:\w+,\s*)?([A-Za-z]{3})[a-z]*\.?\s+(\d{1,2})")

_MONTHS = {
    name: index
    for index, name in enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
        start=1,
    )
}


class _State(Enum):
    AWAITING_DATE = "awaiting_date"
    IN_DAY_HEADER = "in_day_header"
    IN_TIMINGS_LIST = "in_timings_list"


def encode_availability(
    week: WeekWindow,
    selections: Mapping[Union[date, str], Iterable[int]],
    viewer_timezone: str,
) -> str:
    """Render selected UTC hours per day into the blob format.

    Days with no selected hour are left out; hours are written in ascending
    UTC order and labelled in ``viewer_timezone`` on that day's date.
    """
    by_date: Dict[date, set] = {}
    for key, hours in selections.items():
        day = key if isinstance(key, date) else date.fromisoformat(str(key))
        by_date.setdefault(day, set()).update(int(h) for h in hours)

    text = ""
    for day in week.days:
        hours = sorted(h for h in by_date.get(day.date, ()) if 0 <= h <= 23)
        if not hours:
            continue
        text += f"{DATE_PREFIX} {day.display_date}\n"
        text += f"{DAY_PREFIX} {day.day_name}\n"
        text += f"{TIMEZONE_PREFIX} {viewer_timezone}\n"
        text += f"{TIMINGS_HEADER}\n"
        for hour in hours:
            slot = build_slot(hour, day.date, viewer_timezone)
            text += f" {slot.label} (UTC: {slot.utc_range})\n"
        text += "\n"
    return text


def _resolve_block_date(
    display_date: str, week: Optional[WeekWindow], reference_year: int
) -> Optional[date]:
    """Turn ``Monday, Jun 17`` (or an ISO date) into a calendar date."""
    try:
        return date.fromisoformat(display_date.strip())
    except ValueError:
        pass

    match = DISPLAY_DATE_RE.search(display_date)
    if not match:
        return None
    month = _MONTHS.get(match.group(1).title())
    day_of_month = int(match.group(2))
    if month is None:
        return None

    if week is not None:
        for day in week.days:
            if day.date.month == month and day.date.day == day_of_month:
                return day.date
    try:
        return date(reference_year, month, day_of_month)
    except ValueError:
        return None


def _render_slot(
    line: str, block_date: Optional[date], viewer_timezone: str
) -> SlotLabel:
    match = UTC_RANGE_RE.search(line)
    if match:
        start_h, start_m, end_h, end_m = (int(g) for g in match.groups())
        if 0 <= start_h <= 23 and 0 <= end_h <= 24:
            label = convert_utc_range_to_local(
                start_h,
                end_h,
                block_date or utc_today(),
                viewer_timezone,
                start_minute=start_m,
                end_minute=end_m,
            )
            return SlotLabel(label=label, utc_hour=start_h)

    if "(UTC:" in line:
        # UTC marker present but unreadable: keep the author's local label
        return SlotLabel(label=line.split("(UTC:")[0].strip())
    return SlotLabel(label=line)


def decode_availability(
    text: Optional[str],
    viewer_timezone: str = "UTC",
    week: Optional[WeekWindow] = None,
    reference_year: Optional[int] = None,
) -> List[DayAvailability]:
    """Parse a blob into day blocks rendered for ``viewer_timezone``.

    ``week`` (the submission's week) pins each ``Date:`` line to an exact
    calendar date so the DST offset of that day is used; without it the
    month/day is placed in ``reference_year`` (default: the current UTC year).
    """
    if not text:
        return []
    if reference_year is None:
        reference_year = utc_today().year

    days: List[DayAvailability] = []
    current: Optional[DayAvailability] = None
    state = _State.AWAITING_DATE
    submitted_timezone = "UTC"

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(DATE_PREFIX):
            if current is not None:
                days.append(current)
            display_date = line[len(DATE_PREFIX):].strip()
            current = DayAvailability(
                date=display_date,
                timezone=submitted_timezone,
                calendar_date=_resolve_block_date(display_date, week, reference_year),
            )
            state = _State.IN_DAY_HEADER
        elif current is None:
            logger.debug(f"❓ Skipping line before first day block: {line}")
        elif line.startswith(DAY_PREFIX):
            current.day_name = line[len(DAY_PREFIX):].strip()
        elif line.startswith(TIMEZONE_PREFIX):
            submitted_timezone = line[len(TIMEZONE_PREFIX):].strip()
            current.timezone = submitted_timezone
        elif line.startswith(TIMINGS_PREFIX):
            state = _State.IN_TIMINGS_LIST
        elif state is _State.IN_TIMINGS_LIST:
            current.time_slots.append(
                _render_slot(line, current.calendar_date, viewer_timezone)
            )
        else:
            logger.debug(f"❓ Unrecognized line kept verbatim: {line}")
            current.time_slots.append(SlotLabel(label=line))

    if current is not None:
        days.append(current)
    return days
