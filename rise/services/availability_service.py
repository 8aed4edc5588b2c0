# rise/services/availability_service.py
"""
Availability scheduling against the Airtable scheduling base.

Student side: eligibility check and weekly submission. Mentor side: the
latest submission of every program the mentor runs, optionally re-rendered
in the mentor's timezone.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from rise.config import Config
from rise.errors import ValidationError
from rise.models import AvailabilitySubmission, Enrollment
from rise.services.record_store import RecordStore
from rise.utils.availability.codec import decode_availability, encode_availability
from rise.utils.availability.eligibility import check_eligibility, latest_submission
from rise.utils.availability.slots import generate_slots
from rise.utils.availability.weeks import WeekWindow, parse_week_string, utc_today

logger = logging.getLogger(__name__)

NOT_ACTIVE_MESSAGE = "You are not an active student. Kindly contact admin for support."


class AvailabilityService:
    """Student eligibility, submissions and mentor schedules."""

    def __init__(self, config: Config, store: RecordStore):
        self.config = config
        self.store = store

    # ------------------ store access ------------------

    def _fetch(self, table: str, match: Dict[str, str], ignore_case: bool = False):
        self.config.require("SCHEDULING_BASE_ID")
        return self.store.fetch(
            self.config.SCHEDULING_BASE_ID, table, match=match, ignore_case=ignore_case
        )

    def find_enrollments(self, email_field: str, email: str) -> List[Enrollment]:
        records = self._fetch(
            self.config.ENROLLMENTS_TABLE, {email_field: email}, ignore_case=True
        )
        return [Enrollment.from_record(r) for r in records]

    def submissions_for_program(self, program_id: str) -> List[AvailabilitySubmission]:
        records = self._fetch(self.config.AVAILABILITY_TABLE, {"Program ID": program_id})
        return [AvailabilitySubmission.from_record(r) for r in records]

    # ------------------ helpers ------------------

    @staticmethod
    def _submission_payload(
        submission: AvailabilitySubmission, viewer_timezone: Optional[str]
    ) -> Dict[str, Any]:
        payload = submission.to_dict()
        if viewer_timezone:
            try:
                week = parse_week_string(submission.week)
            except ValidationError:
                week = None
            payload["days"] = [
                day.to_dict()
                for day in decode_availability(
                    submission.availability_text, viewer_timezone, week=week
                )
            ]
        return payload

    # ------------------ operations ------------------

    def check_student_eligibility(
        self,
        email: str,
        today: Optional[date] = None,
        viewer_timezone: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not email:
            raise ValidationError("Email is required", field="email")
        today = today or utc_today()
        logger.info(f"🔍 Checking if student {email} is active...")

        enrollments = self.find_enrollments("Student Email", email)
        if not enrollments:
            logger.info(f"❌ {email} has no active program")
            return {
                "success": False,
                "isActiveStudent": False,
                "hasExistingSubmission": False,
                "message": NOT_ACTIVE_MESSAGE,
            }

        enrollment = enrollments[0]
        submissions = self.submissions_for_program(enrollment.program_id)
        result = check_eligibility(enrollment, submissions, today)

        response: Dict[str, Any] = {
            "success": True,
            "isActiveStudent": True,
            "studentData": enrollment.to_dict(),
            "canSubmit": result.can_submit,
            "hasExistingSubmission": not result.can_submit,
            "targetWeek": result.target_week.to_dict(),
        }
        if result.blocking_submission is not None:
            response["existingAvailability"] = self._submission_payload(
                result.blocking_submission, viewer_timezone
            )
            response["message"] = (
                f"You have already submitted your availability for "
                f"{result.blocking_submission.week}. Kindly contact admin to make changes."
            )
        logger.info(
            f"✅ {email} eligible={result.can_submit} target={result.target_week.week_string}"
        )
        return response

    def _build_availability_text(self, payload: Dict[str, Any], week: WeekWindow) -> str:
        text = payload.get("availability")
        if text is not None and not isinstance(text, str):
            raise ValidationError("availability must be text", field="availability")
        if text:
            return text

        selections = payload.get("selections")
        if not selections:
            raise ValidationError(
                "Either availability text or slot selections are required",
                field="availability",
            )
        if not isinstance(selections, dict):
            raise ValidationError(
                "Selections must map dates to lists of UTC hours", field="selections"
            )
        timezone_name = payload.get("timezone") or "UTC"
        try:
            text = encode_availability(week, selections, timezone_name)
        except (TypeError, ValueError):
            raise ValidationError(
                "Selections must map YYYY-MM-DD dates to lists of UTC hours",
                field="selections",
            )
        if not text:
            raise ValidationError(
                "Select at least one time slot within the submitted week",
                field="selections",
            )
        return text

    def submit_availability(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        payload = payload or {}
        for field_name in ("programId", "studentName", "week"):
            if not payload.get(field_name):
                raise ValidationError(f"{field_name} is required", field=field_name)

        week = parse_week_string(payload["week"])
        text = self._build_availability_text(payload, week)
        program_id = str(payload["programId"])

        # Best-effort guard; two racing submissions can still both land
        existing = latest_submission(
            s for s in self.submissions_for_program(program_id)
            if s.week == week.week_string
        )
        if existing is not None:
            logger.info(
                f"⚠️ Program {program_id} already has a submission for {week.week_string}"
            )
            return {
                "success": False,
                "message": (
                    f"Availability for {week.week_string} has already been submitted. "
                    "Kindly contact admin to make changes."
                ),
                "recordId": existing.id,
            }

        logger.info(f"📝 Submitting availability for {program_id} ({week.week_string})")
        self.config.require("SCHEDULING_BASE_ID")
        record = self.store.create(
            self.config.SCHEDULING_BASE_ID,
            self.config.AVAILABILITY_TABLE,
            {
                "Program ID": program_id,
                "Student Name": payload["studentName"],
                "Week": week.week_string,
                "Availability": text,
            },
        )
        return {
            "success": True,
            "message": "Availability submitted successfully",
            "recordId": record.get("id"),
        }

    def get_mentor_schedules(
        self, email: str, viewer_timezone: Optional[str] = None
    ) -> Dict[str, Any]:
        if not email:
            raise ValidationError("Email parameter is required", field="email")
        logger.info(f"📅 Fetching schedules for mentor: {email}")

        enrollments = self.find_enrollments("Mentor Email", email)
        if not enrollments:
            return {"success": True, "programs": [], "totalPrograms": 0}

        with ThreadPoolExecutor(max_workers=self.config.STORE_MAX_WORKERS) as pool:
            per_program = list(
                pool.map(
                    lambda e: self.submissions_for_program(e.program_id), enrollments
                )
            )

        programs = []
        for enrollment, submissions in zip(enrollments, per_program):
            latest = latest_submission(submissions)
            if latest is None:
                continue
            program = self._submission_payload(latest, viewer_timezone)
            program.pop("id", None)
            program["programId"] = enrollment.program_id
            program["studentName"] = latest.student_name or enrollment.student_name
            program["totalSubmissions"] = len(submissions)
            programs.append(program)

        logger.info(f"✅ Loaded {len(programs)} programs with schedules for {email}")
        return {"success": True, "programs": programs, "totalPrograms": len(programs)}

    def list_time_slots(
        self,
        viewer_timezone: Optional[str],
        target_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        timezone_name = viewer_timezone or "UTC"
        parsed_date = None
        if target_date:
            try:
                parsed_date = date.fromisoformat(target_date)
            except ValueError:
                raise ValidationError(
                    f"date must be YYYY-MM-DD, got '{target_date}'", field="date"
                )
        slots = generate_slots(parsed_date, timezone_name, now=now)
        return {
            "success": True,
            "timezone": timezone_name,
            "date": parsed_date.isoformat() if parsed_date else None,
            "slots": [slot.to_dict() for slot in slots],
        }
