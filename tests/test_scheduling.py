import logging
from datetime import datetime, timedelta

import pytest

from activity_engine.clock import FixedClock
from activity_engine.config import BusinessHours
from activity_engine.schema import AppointmentLike
from activity_engine.scheduling import FallbackPolicy, align_up, find_slot

# Monday morning; the scanned days below are later in the week.
CLOCK = FixedClock(datetime(2026, 10, 19, 10, 0))
WEDNESDAY = datetime(2026, 10, 21)


def appointment(start, end, kind="meeting"):
    return AppointmentLike(title="Existing", start_time=start, end_time=end, type=kind)


def at(day, hour, minute=0):
    return day.replace(hour=hour, minute=minute)


def overlaps(slot, appt):
    return slot.start < appt.end_time and appt.start_time < slot.end


def test_empty_calendar_opens_at_start_of_day():
    slot = find_slot([], WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 9)
    assert slot.end == at(WEDNESDAY, 10)
    assert slot.duration_minutes == 60


def test_buffer_after_morning_appointment():
    booked = [appointment(at(WEDNESDAY, 9), at(WEDNESDAY, 10))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert (slot.start, slot.end) == (at(WEDNESDAY, 10, 15), at(WEDNESDAY, 11, 15))


def test_appointment_starting_soon_after_candidate_pushes_it():
    booked = [appointment(at(WEDNESDAY, 9, 30), at(WEDNESDAY, 10))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 10, 15)


def test_appointment_an_hour_later_does_not_conflict():
    booked = [appointment(at(WEDNESDAY, 10), at(WEDNESDAY, 11))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 9)


def test_back_to_back_appointments_chain_pushes():
    booked = [
        appointment(at(WEDNESDAY, 10, 15), at(WEDNESDAY, 11)),
        appointment(at(WEDNESDAY, 9), at(WEDNESDAY, 10)),
    ]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 11, 15)


def test_pushed_candidate_rounds_up_to_quarter_hour():
    booked = [appointment(at(WEDNESDAY, 9), at(WEDNESDAY, 10, 5))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 10, 30)


def test_today_starts_thirty_minutes_from_now():
    slot = find_slot([], clock=FixedClock(datetime(2026, 10, 19, 10, 0)))
    assert slot.start == datetime(2026, 10, 19, 10, 30)

    slot = find_slot([], clock=FixedClock(datetime(2026, 10, 19, 10, 7)))
    assert slot.start == datetime(2026, 10, 19, 10, 45)


def test_today_before_opening_uses_opening():
    slot = find_slot([], clock=FixedClock(datetime(2026, 10, 19, 7, 0)))
    assert slot.start == datetime(2026, 10, 19, 9, 0)


def test_late_today_moves_to_next_day():
    slot = find_slot([], clock=FixedClock(datetime(2026, 10, 19, 16, 20)))
    assert slot.start == datetime(2026, 10, 20, 9, 0)


def test_slot_must_fit_before_close():
    booked = [appointment(at(WEDNESDAY, 9), at(WEDNESDAY, 16, 30))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == datetime(2026, 10, 22, 9, 0)


def test_appointments_on_other_days_are_ignored():
    booked = [appointment(datetime(2026, 10, 22, 9), datetime(2026, 10, 22, 12))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 9)


def booked_week(first_day, days):
    return [
        appointment(first_day + timedelta(days=n, hours=9), first_day + timedelta(days=n, hours=17))
        for n in range(days)
    ]


def test_fully_booked_lookahead_returns_unchecked_fallback(caplog):
    booked = booked_week(WEDNESDAY, 6)
    with caplog.at_level(logging.WARNING, logger="activity_engine.scheduling"):
        slot = find_slot(booked, WEDNESDAY, clock=CLOCK)

    assert slot.start == datetime(2026, 10, 22, 9, 0)
    assert any(overlaps(slot, appt) for appt in booked)
    assert "falling back" in caplog.text


def test_no_slot_policy_returns_none():
    booked = booked_week(WEDNESDAY, 5)
    assert find_slot(booked, WEDNESDAY, clock=CLOCK, fallback=FallbackPolicy.NO_SLOT) is None


def test_keep_scanning_policy_continues_past_lookahead():
    booked = booked_week(WEDNESDAY, 5)
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK, fallback=FallbackPolicy.KEEP_SCANNING)
    assert slot.start == datetime(2026, 10, 26, 9, 0)
    assert not any(overlaps(slot, appt) for appt in booked)


def test_keep_scanning_policy_gives_up_eventually():
    hours = BusinessHours(extended_lookahead_days=3)
    booked = booked_week(WEDNESDAY, 8)
    assert find_slot(booked, WEDNESDAY, clock=CLOCK, hours=hours, fallback=FallbackPolicy.KEEP_SCANNING) is None


@pytest.mark.parametrize(
    "spans",
    [
        [(9, 0, 10, 0)],
        [(9, 30, 10, 45), (11, 0, 12, 0)],
        [(9, 0, 9, 30), (9, 45, 11, 10), (12, 30, 13, 0)],
        [(8, 0, 9, 15), (10, 45, 11, 30), (11, 30, 16, 0)],
        [(13, 0, 14, 0), (9, 10, 9, 50)],
    ],
)
def test_returned_slot_never_overlaps_same_day_appointments(spans):
    booked = [appointment(at(WEDNESDAY, h1, m1), at(WEDNESDAY, h2, m2)) for h1, m1, h2, m2 in spans]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK)
    assert slot.start.date() == WEDNESDAY.date()
    assert slot.start.minute % 15 == 0
    assert not any(overlaps(slot, appt) for appt in booked)


def test_preferred_date_accepts_iso_strings():
    slot = find_slot([], "2026-10-21T13:00:00", clock=CLOCK)
    assert slot.start == at(WEDNESDAY, 9)


def test_invalid_preferred_date_raises():
    with pytest.raises(ValueError):
        find_slot([], "someday", clock=CLOCK)


def test_custom_business_hours():
    hours = BusinessHours(start_hour=8, end_hour=12)
    booked = [appointment(at(WEDNESDAY, 8), at(WEDNESDAY, 11))]
    slot = find_slot(booked, WEDNESDAY, clock=CLOCK, hours=hours)
    assert slot.start == datetime(2026, 10, 22, 8, 0)


def test_business_hours_from_env(monkeypatch):
    monkeypatch.setenv("ACTIVITY_ENGINE_BUSINESS_START", "10")
    monkeypatch.setenv("ACTIVITY_ENGINE_LOOKAHEAD_DAYS", "2")
    hours = BusinessHours.from_env()
    assert hours.start_hour == 10
    assert hours.end_hour == 17
    assert hours.lookahead_days == 2


def test_align_up():
    assert align_up(datetime(2026, 10, 21, 10, 15), 15) == datetime(2026, 10, 21, 10, 15)
    assert align_up(datetime(2026, 10, 21, 10, 15, 1), 15) == datetime(2026, 10, 21, 10, 30)
    assert align_up(datetime(2026, 10, 21, 10, 50), 15) == datetime(2026, 10, 21, 11, 0)
