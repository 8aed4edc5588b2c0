from datetime import date, datetime, timedelta, timezone

import pytest

from rise.models import AvailabilitySubmission, Enrollment
from rise.utils.availability.eligibility import check_eligibility, latest_submission
from rise.utils.availability.weeks import naive_week

ENROLLMENT = Enrollment(
    program_id="P-100",
    student_name="Asha Rao",
    student_email="asha@example.com",
    mentor_email="mentor@example.com",
)


def submission(week, created=datetime(2024, 6, 1, tzinfo=timezone.utc), record_id="rec1"):
    return AvailabilitySubmission(
        id=record_id,
        program_id="P-100",
        student_name="Asha Rao",
        week=week,
        availability_text="",
        created_at=created,
    )


def test_first_submission_targets_naive_week():
    result = check_eligibility(ENROLLMENT, [], date(2024, 6, 12))
    assert result.can_submit
    assert result.blocking_submission is None
    assert result.target_week.week_string == "2024-06-17 to 2024-06-23"


@pytest.mark.parametrize("days_ahead", [1, 5, 12, 40])
def test_future_submission_always_blocks(days_ahead):
    today = date(2024, 6, 12)
    monday = naive_week(today + timedelta(days=days_ahead)).monday
    future = submission(f"{monday.isoformat()} to {(monday + timedelta(days=6)).isoformat()}")
    result = check_eligibility(ENROLLMENT, [future], today)
    assert not result.can_submit
    assert result.blocking_submission == future
    assert result.target_week.monday == monday + timedelta(days=7)


def test_past_submissions_do_not_block():
    old = submission("2024-05-27 to 2024-06-02")
    result = check_eligibility(ENROLLMENT, [old], date(2024, 6, 12))
    assert result.can_submit
    assert result.target_week == naive_week(date(2024, 6, 12))


def test_week_in_progress_does_not_block_the_next_one():
    current = submission("2024-06-10 to 2024-06-16")
    result = check_eligibility(ENROLLMENT, [current], date(2024, 6, 12))
    assert result.can_submit
    assert result.target_week.week_string == "2024-06-17 to 2024-06-23"


def test_submission_for_target_week_starting_today_blocks():
    # On Monday the naive week is the current one; a record for it exists
    booked = submission("2024-06-17 to 2024-06-23")
    result = check_eligibility(ENROLLMENT, [booked], date(2024, 6, 17))
    assert not result.can_submit
    assert result.blocking_submission == booked
    assert result.target_week.week_string == "2024-06-17 to 2024-06-23"


def test_latest_picks_week_then_created_time():
    early = submission("2024-06-17 to 2024-06-23", datetime(2024, 6, 10, tzinfo=timezone.utc), "recA")
    late = submission("2024-06-17 to 2024-06-23", datetime(2024, 6, 11, tzinfo=timezone.utc), "recB")
    older_week = submission("2024-06-10 to 2024-06-16", datetime(2024, 6, 12, tzinfo=timezone.utc), "recC")
    assert latest_submission([early, older_week, late]).id == "recB"
    assert latest_submission([]) is None
