"""Appointment type recommendation from recent scheduling history."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from activity_engine.clock import Clock
from activity_engine.config import BusinessHours, TypeWeighting
from activity_engine.schema import AppointmentLike, AppointmentRecommendation
from activity_engine.scheduling import FallbackPolicy, find_slot


def type_weights(appointments: Iterable[AppointmentLike], weighting: TypeWeighting | None = None) -> dict[str, float]:
    """Accumulate recency-decayed weights per appointment type.

    Only the ``history_size`` most recently started appointments vote; types
    outside ``type_order`` keep their rank but add no weight.
    """

    weighting = weighting or TypeWeighting()
    weights = {kind: 0.0 for kind in weighting.type_order}
    recent = sorted(appointments, key=lambda a: a.start_time, reverse=True)[: weighting.history_size]
    for rank, appointment in enumerate(recent):
        if appointment.type in weights:
            weights[appointment.type] += max(1.0 - rank * weighting.decay_per_rank, weighting.min_weight)
    return weights


def recommend_type(
    appointments: Iterable[AppointmentLike],
    weighting: TypeWeighting | None = None,
) -> tuple[str, float]:
    """Return the winning appointment type and a clamped confidence."""

    weighting = weighting or TypeWeighting()
    weights = type_weights(appointments, weighting)

    winner = weighting.default_type
    best = float("-inf")
    for kind in weighting.type_order:
        if weights[kind] > best:
            winner, best = kind, weights[kind]

    total = sum(weights.values()) or 1.0
    confidence = min(weighting.confidence_ceiling, max(weighting.confidence_floor, best / total))
    return winner, confidence


def suggest_appointment(
    appointments: Iterable[AppointmentLike],
    preferred_date: datetime | date | str | None = None,
    *,
    clock: Clock | None = None,
    hours: BusinessHours | None = None,
    weighting: TypeWeighting | None = None,
    fallback: FallbackPolicy = FallbackPolicy.NEXT_DAY_OPENING,
) -> AppointmentRecommendation | None:
    """Pair the next open slot with the type suggested by recent history."""

    appointments = list(appointments)
    slot = find_slot(appointments, preferred_date, clock=clock, hours=hours, fallback=fallback)
    if slot is None:
        return None

    kind, confidence = recommend_type(appointments, weighting)
    return AppointmentRecommendation(
        date=slot.start.strftime("%Y-%m-%d"),
        start_time=slot.start.strftime("%H:%M"),
        end_time=slot.end.strftime("%H:%M"),
        type=kind,
        confidence=confidence,
        rationale=f"Based on recent scheduling patterns and availability on {slot.start:%b} {slot.start.day}.",
    )
