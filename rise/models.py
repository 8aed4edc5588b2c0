# rise/models.py
"""Domain records mapped from Airtable rows, plus the enums parsed at that boundary."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(Enum):
    STUDENT = "Student"
    PARENT = "Parent"
    MENTOR = "Mentor"
    WRITING_COACH = "Writing Coach"
    TEAM = "Team"
    UNKNOWN = "Unknown"

    @classmethod
    def from_table(cls, table_name: str) -> "Role":
        """Map a contact-base table name onto the role its members hold."""
        table_roles = {
            "students": cls.STUDENT,
            "parents": cls.PARENT,
            "mentors": cls.MENTOR,
            "writing coaches": cls.WRITING_COACH,
            "team": cls.TEAM,
        }
        return table_roles.get((table_name or "").strip().lower(), cls.UNKNOWN)


class ConfirmationStatus(Enum):
    CLASS_CONFIRMED = "Class Confirmed"
    ISSUE_RAISED = "Issue Raised"
    PENDING = "Pending"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> "ConfirmationStatus":
        if not value:
            return cls.PENDING
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        return cls.UNKNOWN


class ReportStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> "ReportStatus":
        for status in (cls.PENDING, cls.SENT):
            if status.value.lower() == str(value or "").strip().lower():
                return status
        return cls.UNKNOWN


def _text(fields: Dict[str, Any], name: str) -> str:
    value = fields.get(name, "")
    if isinstance(value, list):
        # Lookup fields come back as single-element lists
        value = value[0] if value else ""
    return str(value).strip() if value is not None else ""


def _parse_created_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class Enrollment:
    """An active program linking one student to one mentor."""

    program_id: str
    student_name: str
    student_email: str
    mentor_email: str
    record_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Enrollment":
        fields = record.get("fields", {})
        return cls(
            program_id=_text(fields, "Program ID"),
            student_name=_text(fields, "Student Name"),
            student_email=_text(fields, "Student Email").lower(),
            mentor_email=_text(fields, "Mentor Email").lower(),
            record_id=record.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "programId": self.program_id,
            "studentName": self.student_name,
            "studentEmail": self.student_email,
            "mentorEmail": self.mentor_email,
        }


@dataclass(frozen=True)
class AvailabilitySubmission:
    """One append-only availability record for a program and week."""

    id: str
    program_id: str
    student_name: str
    week: str
    availability_text: str
    created_at: Optional[datetime] = None

    @property
    def week_start(self) -> Optional[date]:
        try:
            return date.fromisoformat(self.week.split(" to ")[0].strip())
        except ValueError:
            return None

    @property
    def sort_key(self):
        # Week strings are ISO-date prefixed, so lexicographic order is date order
        created = self.created_at.isoformat() if self.created_at else ""
        return (self.week, created)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "AvailabilitySubmission":
        fields = record.get("fields", {})
        return cls(
            id=record.get("id", ""),
            program_id=_text(fields, "Program ID"),
            student_name=_text(fields, "Student Name"),
            week=_text(fields, "Week"),
            availability_text=fields.get("Availability", "") or "",
            created_at=_parse_created_time(record.get("createdTime")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "programId": self.program_id,
            "studentName": self.student_name,
            "week": self.week,
            "availability": self.availability_text,
            "createdTime": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class TimeSlot:
    """An hourly slot: UTC hour is authoritative, the rest is display-only."""

    utc_hour: int
    start: str
    end: str
    timezone_abbrev: str

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end} {self.timezone_abbrev}"

    @property
    def utc_range(self) -> str:
        return f"{self.utc_hour:02d}:00 - {(self.utc_hour + 1) % 24:02d}:00"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.utc_hour,
            "utcHour": self.utc_hour,
            "label": self.label,
            "start": self.start,
            "end": self.end,
            "timezone": self.timezone_abbrev,
        }


@dataclass
class SlotLabel:
    """A decoded slot line; ``utc_hour`` is None for pass-through lines."""

    label: str
    utc_hour: Optional[int] = None


@dataclass
class DayAvailability:
    """One decoded day block of an availability blob."""

    date: str
    day_name: str = ""
    timezone: str = "UTC"
    time_slots: List[SlotLabel] = field(default_factory=list)
    calendar_date: Optional[date] = None

    @property
    def utc_hours(self) -> List[int]:
        return [slot.utc_hour for slot in self.time_slots if slot.utc_hour is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "day": self.day_name,
            "timezone": self.timezone,
            "timeSlots": [slot.label for slot in self.time_slots],
            "utcHours": self.utc_hours,
        }
