"""Heuristic no-show risk scoring for appointments."""

from __future__ import annotations

from activity_engine.clock import Clock, resolve
from activity_engine.config import ShowUpWeights
from activity_engine.schema import AppointmentLike, ShowUpAssessment


def hours_until(appointment: AppointmentLike, clock: Clock | None = None) -> int:
    """Whole hours from now until the start, truncated toward zero."""

    delta = appointment.start_time - resolve(clock).now()
    return int(delta.total_seconds() / 3600)


def risk_level(likelihood: float, weights: ShowUpWeights | None = None) -> str:
    weights = weights or ShowUpWeights()
    if likelihood < weights.high_risk_below:
        return "high"
    if likelihood < weights.medium_risk_below:
        return "medium"
    return "low"


def assess_show_up(
    appointment: AppointmentLike,
    clock: Clock | None = None,
    weights: ShowUpWeights | None = None,
) -> ShowUpAssessment:
    """Estimate attendance likelihood and explain each adjustment applied."""

    weights = weights or ShowUpWeights()
    signals: list[str] = []
    likelihood = weights.base

    def apply(adjustment: tuple[float, str]) -> None:
        nonlocal likelihood
        delta, signal = adjustment
        likelihood += delta
        if signal:
            signals.append(signal)

    if appointment.priority in weights.priority:
        apply(weights.priority[appointment.priority])

    if appointment.type in weights.appointment_type:
        apply(weights.appointment_type[appointment.type])

    hours = hours_until(appointment, clock)
    if hours < 0:
        signals.append(weights.past_signal)
    elif hours <= weights.confirmed_window_hours:
        apply(weights.confirmed)
    elif hours > weights.far_advance_hours:
        apply(weights.far_advance)

    if not appointment.client_name:
        apply(weights.missing_contact)

    likelihood = max(weights.floor, min(weights.ceiling, likelihood))
    return ShowUpAssessment(
        likelihood=likelihood,
        risk_level=risk_level(likelihood, weights),
        signals=signals,
    )
