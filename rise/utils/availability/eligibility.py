# rise/utils/availability/eligibility.py
"""Decides whether a student may submit availability for the next week."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from rise.models import AvailabilitySubmission, Enrollment
from rise.utils.availability.weeks import WeekWindow, current_or_next_week, naive_week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityResult:
    can_submit: bool
    target_week: WeekWindow
    blocking_submission: Optional[AvailabilitySubmission] = None


def latest_submission(
    submissions: Iterable[AvailabilitySubmission],
) -> Optional[AvailabilitySubmission]:
    """Latest by week string, then by creation time (both descending)."""
    ordered = sorted(submissions, key=lambda s: s.sort_key, reverse=True)
    return ordered[0] if ordered else None


def check_eligibility(
    enrollment: Enrollment,
    submissions: Iterable[AvailabilitySubmission],
    today: date,
) -> EligibilityResult:
    """First booking wins.

    A submission whose week starts after ``today`` blocks any new one. Once
    that week has started, the next upcoming week is open unless a submission
    already exists for exactly that week string.
    """
    submissions = list(submissions)
    latest = latest_submission(submissions)

    if latest is None:
        return EligibilityResult(can_submit=True, target_week=naive_week(today))

    latest_start = latest.week_start
    if latest_start is not None and latest_start > today:
        logger.info(
            f"⚠️ Program {enrollment.program_id} already booked future week {latest.week}"
        )
        return EligibilityResult(
            can_submit=False,
            target_week=current_or_next_week(today, latest_start),
            blocking_submission=latest,
        )

    target = naive_week(today)
    same_week = latest_submission(s for s in submissions if s.week == target.week_string)
    if same_week is not None:
        logger.info(
            f"⚠️ Program {enrollment.program_id} already submitted for {target.week_string}"
        )
        return EligibilityResult(
            can_submit=False, target_week=target, blocking_submission=same_week
        )
    return EligibilityResult(can_submit=True, target_week=target)
