"""Rule cascade assigning an urgency tier to a work item."""

from __future__ import annotations

from datetime import datetime, timedelta

from activity_engine.clock import Clock, resolve
from activity_engine.schema import Urgency

_STARTING_SOON = timedelta(hours=2)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_week(value: datetime) -> datetime:
    """Last instant of the Sunday-to-Saturday week containing ``value``."""

    days_to_saturday = (5 - value.weekday()) % 7
    return start_of_day(value) + timedelta(days=days_to_saturday + 1, microseconds=-1)


def classify(
    priority: str,
    due_date: datetime | None = None,
    start_time: datetime | None = None,
    severity: str | None = None,
    action_required: bool = False,
    completed: bool = False,
    clock: Clock | None = None,
) -> Urgency:
    """Return ``now``, ``next`` or ``scheduled``; the first matching rule wins.

    ``completed`` is accepted so every source type can pass its full status,
    but no rule currently depends on it.
    """

    now = resolve(clock).now()
    today = start_of_day(now)
    tomorrow = today + timedelta(days=1)
    week_end = end_of_week(today)
    next_week_end = week_end + timedelta(weeks=1)

    if (
        priority == "critical"
        or (due_date is not None and due_date < today)
        or (due_date is not None and today <= due_date < tomorrow)
        or (severity == "critical" and action_required)
        or (start_time is not None and start_time < now + _STARTING_SOON)
    ):
        return "now"

    if (
        priority == "high"
        or (due_date is not None and today <= due_date < week_end)
        or (severity == "warning" and action_required)
        or (start_time is not None and today <= start_time < next_week_end)
    ):
        return "next"

    return "scheduled"
