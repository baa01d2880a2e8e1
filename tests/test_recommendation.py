from datetime import datetime, timedelta

import pytest

from activity_engine.clock import FixedClock
from activity_engine.config import TypeWeighting
from activity_engine.recommendation import recommend_type, suggest_appointment, type_weights
from activity_engine.scheduling import FallbackPolicy
from activity_engine.schema import AppointmentLike

CLOCK = FixedClock(datetime(2026, 10, 19, 10, 0))
LATEST = datetime(2026, 10, 16, 10, 0)


def history(kinds):
    """Appointments one day apart; the first kind is the most recent."""

    return [
        AppointmentLike(
            title=f"Past {index}",
            start_time=LATEST - timedelta(days=index),
            end_time=LATEST - timedelta(days=index) + timedelta(hours=1),
            type=kind,
        )
        for index, kind in enumerate(kinds)
    ]


def test_recent_calls_win():
    appointments = history(["call"] * 6 + ["meeting"] * 4)
    kind, confidence = recommend_type(appointments)
    assert kind == "call"
    assert confidence > 0.5
    assert confidence == pytest.approx(4.8 / 6.4)


def test_input_order_does_not_matter():
    appointments = history(["call"] * 6 + ["meeting"] * 4)
    assert recommend_type(list(reversed(appointments))) == recommend_type(appointments)


def test_empty_history_defaults_to_meeting_with_floor_confidence():
    assert recommend_type([]) == ("meeting", 0.5)


def test_confidence_is_capped():
    kind, confidence = recommend_type(history(["video_call"] * 10))
    assert kind == "video_call"
    assert confidence == 0.95


def test_only_ten_most_recent_vote():
    weights = type_weights(history(["meeting"] * 10 + ["video_call"] * 5))
    assert weights["video_call"] == 0.0
    assert weights["meeting"] == pytest.approx(sum(1 - rank * 0.08 for rank in range(10)))


def test_weights_never_drop_below_minimum():
    weighting = TypeWeighting(history_size=15)
    weights = type_weights(history(["meeting"] * 14 + ["call"]), weighting)
    assert weights["call"] == pytest.approx(0.2)


def test_ties_follow_declared_type_order():
    flat = TypeWeighting(decay_per_rank=0.0)
    assert recommend_type(history(["call", "meeting"]), flat)[0] == "meeting"
    assert recommend_type(history(["video_call", "call"]), flat)[0] == "call"


def test_unknown_types_keep_rank_without_weight():
    weights = type_weights(history(["email", "call"]))
    assert weights["call"] == pytest.approx(0.92)
    assert "email" not in weights


def test_suggest_appointment_combines_slot_and_type():
    booked = history(["call"] * 6 + ["meeting"] * 4)
    booked.append(
        AppointmentLike(
            title="Wednesday review",
            start_time=datetime(2026, 10, 21, 9, 0),
            end_time=datetime(2026, 10, 21, 10, 0),
            type="call",
        )
    )
    suggestion = suggest_appointment(booked, datetime(2026, 10, 21), clock=CLOCK)
    assert suggestion.date == "2026-10-21"
    assert suggestion.start_time == "10:15"
    assert suggestion.end_time == "11:15"
    assert suggestion.type == "call"
    assert 0.5 <= suggestion.confidence <= 0.95
    assert suggestion.rationale == "Based on recent scheduling patterns and availability on Oct 21."


def test_suggest_appointment_with_strict_policy_can_return_none():
    day = datetime(2026, 10, 21)
    booked = [
        AppointmentLike(
            title="Blocked",
            start_time=day + timedelta(days=n, hours=9),
            end_time=day + timedelta(days=n, hours=17),
        )
        for n in range(5)
    ]
    assert suggest_appointment(booked, day, clock=CLOCK, fallback=FallbackPolicy.NO_SLOT) is None
