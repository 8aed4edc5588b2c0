# rise/utils/availability/slots.py
"""Hourly booking slots rendered in the viewer's timezone."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from rise.models import TimeSlot
from rise.utils.availability.timezones import (
    convert_utc_hour_to_local,
    local_now,
)
from rise.utils.availability.weeks import utc_today

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def build_slot(utc_hour: int, on_date: date, viewer_timezone: str) -> TimeSlot:
    start = convert_utc_hour_to_local(utc_hour, on_date, viewer_timezone)
    end = convert_utc_hour_to_local(utc_hour + 1, on_date, viewer_timezone)
    return TimeSlot(
        utc_hour=utc_hour,
        start=start.label,
        end=end.label,
        timezone_abbrev=start.abbrev,
    )


def generate_slots(
    target_date: Optional[date],
    viewer_timezone: str,
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """One slot per UTC hour, minus the hours already gone for the viewer today.

    When ``target_date`` is the viewer's local today, every slot whose local
    hour is at or before the current local hour is dropped (the hour in
    progress included). With ``target_date=None`` nothing is filtered; that
    listing backs the default modal grid.
    """
    viewer_now = local_now(viewer_timezone, now)
    render_date = target_date or utc_today(now)
    is_today = target_date is not None and target_date == viewer_now.date()

    slots = []
    for utc_hour in range(HOURS_PER_DAY):
        local_hour = convert_utc_hour_to_local(utc_hour, render_date, viewer_timezone).hour
        if is_today and local_hour <= viewer_now.hour:
            continue
        slots.append(build_slot(utc_hour, render_date, viewer_timezone))

    logger.debug(
        f"🕐 Generated {len(slots)} slots for {render_date.isoformat()} in {viewer_timezone}"
    )
    return slots
