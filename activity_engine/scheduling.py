"""Next-available appointment slot search within business hours."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from activity_engine.clock import Clock, parse_timestamp, resolve
from activity_engine.config import BusinessHours
from activity_engine.schema import AppointmentLike, Slot
from activity_engine.urgency import start_of_day

logger = logging.getLogger(__name__)


class FallbackPolicy(str, Enum):
    """What to return once the lookahead finds no free slot.

    ``NEXT_DAY_OPENING`` returns the opening of the day after the preferred
    date without checking it for conflicts.
    """

    NEXT_DAY_OPENING = "next_day_opening"
    NO_SLOT = "no_slot"
    KEEP_SCANNING = "keep_scanning"


def working_bounds(day: datetime, hours: BusinessHours) -> tuple[datetime, datetime]:
    midnight = start_of_day(day)
    return midnight + timedelta(hours=hours.start_hour), midnight + timedelta(hours=hours.end_hour)


def align_up(value: datetime, minutes: int) -> datetime:
    """Round ``value`` up to the next multiple of ``minutes`` past the hour."""

    floored = value.replace(second=0, microsecond=0) - timedelta(minutes=value.minute % minutes)
    if floored == value:
        return floored
    return floored + timedelta(minutes=minutes)


def find_slot_for_day(
    day: datetime,
    day_appointments: list[AppointmentLike],
    now: datetime,
    hours: BusinessHours,
) -> Slot | None:
    """Return the earliest free slot on ``day`` or None if the day is full."""

    work_start, work_end = working_bounds(day, hours)
    duration = timedelta(minutes=hours.slot_minutes)

    candidate = work_start
    if day.date() == now.date() and now > candidate:
        candidate = align_up(now + timedelta(minutes=hours.same_day_lead_minutes), hours.granularity_minutes)

    for appointment in sorted(day_appointments, key=lambda a: a.start_time):
        if appointment.start_time - candidate >= duration:
            break
        if appointment.end_time > candidate:
            candidate = align_up(
                appointment.end_time + timedelta(minutes=hours.buffer_minutes),
                hours.granularity_minutes,
            )
        if candidate >= work_end:
            return None

    if candidate + duration > work_end:
        return None
    return Slot(start=candidate, end=candidate + duration)


def _scan(
    first_day: datetime,
    days: int,
    appointments: list[AppointmentLike],
    now: datetime,
    hours: BusinessHours,
) -> Slot | None:
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        day_appointments = [a for a in appointments if a.start_time.date() == day.date()]
        slot = find_slot_for_day(day, day_appointments, now, hours)
        if slot is not None:
            return slot
        logger.debug("No free slot on %s (%d appointments)", day.date(), len(day_appointments))
    return None


def find_slot(
    appointments: Iterable[AppointmentLike],
    preferred_date: datetime | date | str | None = None,
    *,
    clock: Clock | None = None,
    hours: BusinessHours | None = None,
    fallback: FallbackPolicy = FallbackPolicy.NEXT_DAY_OPENING,
) -> Slot | None:
    """Find the next open slot on or after ``preferred_date``.

    Days are scanned one at a time for ``hours.lookahead_days`` days. When
    nothing fits, ``fallback`` decides the result; the default policy always
    returns a slot, which may overlap existing appointments.
    """

    hours = hours or BusinessHours()
    now = resolve(clock).now()
    base = parse_timestamp(preferred_date) if preferred_date is not None else now
    ordered = sorted(appointments, key=lambda a: a.start_time)

    slot = _scan(base, hours.lookahead_days, ordered, now, hours)
    if slot is not None:
        return slot

    if fallback is FallbackPolicy.NEXT_DAY_OPENING:
        start, _ = working_bounds(base + timedelta(days=1), hours)
        logger.warning(
            "No free slot within %d days of %s; falling back to unchecked slot at %s",
            hours.lookahead_days,
            base.date(),
            start,
        )
        return Slot(start=start, end=start + timedelta(minutes=hours.slot_minutes))

    if fallback is FallbackPolicy.KEEP_SCANNING:
        return _scan(
            base + timedelta(days=hours.lookahead_days),
            hours.extended_lookahead_days,
            ordered,
            now,
            hours,
        )

    return None
