from datetime import date, datetime, timezone

from rise.utils.availability.slots import generate_slots


NOW = datetime(2024, 6, 12, 14, 30, tzinfo=timezone.utc)


def test_no_target_date_lists_all_hours():
    slots = generate_slots(None, "UTC", now=NOW)
    assert [s.utc_hour for s in slots] == list(range(24))


def test_today_drops_current_and_past_local_hours():
    slots = generate_slots(date(2024, 6, 12), "UTC", now=NOW)
    assert [s.utc_hour for s in slots] == list(range(15, 24))
    assert slots[0].label == "3:00 PM - 4:00 PM UTC"


def test_other_days_are_not_filtered():
    slots = generate_slots(date(2024, 6, 13), "UTC", now=NOW)
    assert len(slots) == 24


def test_today_is_judged_in_the_viewer_zone():
    # 14:30 UTC is 10:30 EDT; local hours 0-10 are gone
    slots = generate_slots(date(2024, 6, 12), "America/New_York", now=NOW)
    local_starts = [s.start for s in slots]
    assert "10:00 AM" not in local_starts
    assert "11:00 AM" in local_starts
    assert all(s.timezone_abbrev == "EDT" for s in slots)


def test_slot_carries_utc_hour_and_local_rendering():
    slot = generate_slots(date(2024, 6, 17), "America/New_York", now=NOW)[13]
    assert slot.utc_hour == 13
    assert slot.label == "9:00 AM - 10:00 AM EDT"
    assert slot.utc_range == "13:00 - 14:00"
    assert slot.to_dict()["utcHour"] == 13


def test_generation_is_restartable():
    first = generate_slots(date(2024, 6, 17), "Europe/London", now=NOW)
    second = generate_slots(date(2024, 6, 17), "Europe/London", now=NOW)
    assert first == second
