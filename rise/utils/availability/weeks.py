# rise/utils/availability/weeks.py
"""Monday-start booking weeks on the UTC calendar."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional, Tuple

from dateutil import tz

from rise.errors import ValidationError

WEEK_SEPARATOR = " to "


@dataclass(frozen=True)
class WeekDay:
    date: date
    is_today: bool = False

    @property
    def date_string(self) -> str:
        return self.date.isoformat()

    @property
    def day_name(self) -> str:
        return self.date.strftime("%A")

    @property
    def display_date(self) -> str:
        # "Monday, Jun 17" as rendered in the week grid
        return f"{self.day_name}, {self.date.strftime('%b')} {self.date.day}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "dateString": self.date_string,
            "displayDate": self.display_date,
            "dayName": self.day_name,
            "isToday": self.is_today,
        }


@dataclass(frozen=True)
class WeekWindow:
    monday: date
    today: Optional[date] = None

    def __post_init__(self):
        if self.monday.weekday() != 0:
            raise ValueError(f"Week must start on a Monday, got {self.monday.isoformat()}")

    @property
    def sunday(self) -> date:
        return self.monday + timedelta(days=6)

    @property
    def days(self) -> Tuple[WeekDay, ...]:
        return tuple(
            WeekDay(date=d, is_today=(d == self.today))
            for d in (self.monday + timedelta(days=i) for i in range(7))
        )

    @property
    def week_string(self) -> str:
        return f"{self.monday.isoformat()}{WEEK_SEPARATOR}{self.sunday.isoformat()}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "week": self.week_string,
            "monday": self.monday.isoformat(),
            "sunday": self.sunday.isoformat(),
            "days": [day.to_dict() for day in self.days],
        }


def utc_today(now: Optional[datetime] = None) -> date:
    if now is None:
        return datetime.now(tz.UTC).date()
    if now.tzinfo is not None:
        now = now.astimezone(tz.UTC)
    return now.date()


def upcoming_monday(today: date) -> date:
    """Monday stays put; Sunday rolls forward one day; Tuesday-Saturday jump to next Monday."""
    weekday = today.weekday()  # Monday == 0
    if weekday == 0:
        return today
    return today + timedelta(days=7 - weekday)


def naive_week(today: date) -> WeekWindow:
    return WeekWindow(monday=upcoming_monday(today), today=today)


def current_or_next_week(
    today: date, existing_week_start: Optional[date] = None
) -> WeekWindow:
    """The week a student should book next.

    When an existing submission starts strictly after ``today`` the week that
    follows it is returned, so bookings never overlap or go out of order.
    Otherwise the naive upcoming week is returned and the conflict checker
    decides whether it is already taken.
    """
    if existing_week_start is not None and existing_week_start > today:
        existing_monday = existing_week_start - timedelta(days=existing_week_start.weekday())
        return WeekWindow(monday=existing_monday + timedelta(days=7), today=today)
    return naive_week(today)


def parse_week_string(text: str, today: Optional[date] = None) -> WeekWindow:
    """Parse ``YYYY-MM-DD to YYYY-MM-DD`` into a Monday-Sunday window."""
    parts = (text or "").split(WEEK_SEPARATOR)
    if len(parts) != 2:
        raise ValidationError(
            f"Week must look like 'YYYY-MM-DD to YYYY-MM-DD', got '{text}'", field="week"
        )
    try:
        start, end = (date.fromisoformat(p.strip()) for p in parts)
    except ValueError:
        raise ValidationError(f"Week contains an invalid date: '{text}'", field="week")

    if start.weekday() != 0 or end != start + timedelta(days=6):
        raise ValidationError(
            f"Week must run Monday to Sunday, got '{text}'", field="week"
        )
    return WeekWindow(monday=start, today=today)
