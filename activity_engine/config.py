"""Tunable scheduling windows and heuristic weight tables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BusinessHours:
    """Working window and scan limits used by the slot finder."""

    start_hour: int = 9
    end_hour: int = 17
    slot_minutes: int = 60
    granularity_minutes: int = 15
    buffer_minutes: int = 15
    same_day_lead_minutes: int = 30
    lookahead_days: int = 5
    extended_lookahead_days: int = 30

    @classmethod
    def from_env(cls) -> "BusinessHours":
        defaults = cls()
        return cls(
            start_hour=int(os.getenv("ACTIVITY_ENGINE_BUSINESS_START", str(defaults.start_hour))),
            end_hour=int(os.getenv("ACTIVITY_ENGINE_BUSINESS_END", str(defaults.end_hour))),
            lookahead_days=int(os.getenv("ACTIVITY_ENGINE_LOOKAHEAD_DAYS", str(defaults.lookahead_days))),
        )


@dataclass(frozen=True)
class TypeWeighting:
    """Recency-decay vote over recent appointment types."""

    history_size: int = 10
    decay_per_rank: float = 0.08
    min_weight: float = 0.2
    confidence_floor: float = 0.5
    confidence_ceiling: float = 0.95
    # Declared order doubles as the tie-break order.
    type_order: tuple[str, ...] = ("meeting", "call", "video_call")
    default_type: str = "meeting"


@dataclass(frozen=True)
class ShowUpWeights:
    """Additive adjustments applied by the no-show risk assessor.

    Each adjustment maps a condition to ``(delta, signal)``; an empty signal
    adjusts the score without logging anything.
    """

    base: float = 0.78
    priority: dict[str, tuple[float, str]] = field(
        default_factory=lambda: {
            "high": (0.12, "High priority engagement"),
            "low": (-0.10, "Low priority meeting"),
        }
    )
    appointment_type: dict[str, tuple[float, str]] = field(
        default_factory=lambda: {
            "video_call": (-0.06, "Virtual meeting"),
            "meeting": (0.05, ""),
        }
    )
    past_signal: str = "Appointment already completed"
    confirmed_window_hours: int = 24
    confirmed: tuple[float, str] = (0.05, "Confirmed within 24 hours")
    far_advance_hours: int = 72
    far_advance: tuple[float, str] = (-0.04, "Scheduled far in advance")
    missing_contact: tuple[float, str] = (-0.05, "Prospect without confirmed contact")
    floor: float = 0.2
    ceiling: float = 0.98
    high_risk_below: float = 0.55
    medium_risk_below: float = 0.70
