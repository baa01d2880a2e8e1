"""Normalize raw task, alert, appointment and follow-up records."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from activity_engine.clock import Clock, parse_optional, parse_timestamp, resolve
from activity_engine.schema import (
    ITEM_TYPES,
    PRIORITY_LEVELS,
    SEVERITY_LEVELS,
    AlertItem,
    AppointmentItem,
    AppointmentLike,
    FollowUpItem,
    TaskItem,
    UnifiedItem,
)
from activity_engine.urgency import classify

logger = logging.getLogger(__name__)

_SEVERITY_PRIORITY = {"critical": "critical", "warning": "high", "info": "medium"}
_TIMESTAMP_FIELDS = ("created_at", "due_date", "start_time", "end_time")


def _field(record: dict, camel: str, snake: str | None = None, default: Any = None) -> Any:
    if camel in record:
        return record[camel]
    if snake is not None and snake in record:
        return record[snake]
    return default


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _priority(value: Any) -> str:
    if value in PRIORITY_LEVELS:
        return value
    if value is not None:
        logger.debug("Unknown priority %r, defaulting to medium", value)
    return "medium"


def _severity(value: Any) -> str | None:
    return value if value in SEVERITY_LEVELS else None


def _common(record: dict, clock: Clock | None, client_name: str | None, prospect_name: str | None) -> dict:
    if "id" not in record:
        raise ValueError("Source record is missing 'id'")

    created_at = parse_optional(_field(record, "createdAt", "created_at"))
    return {
        "source_id": record["id"],
        "title": str(record.get("title") or ""),
        "description": _text(record.get("description")),
        "created_at": created_at or resolve(clock).now(),
        "client_id": _field(record, "clientId", "client_id"),
        "prospect_id": _field(record, "prospectId", "prospect_id"),
        "client_name": client_name or _field(record, "clientName", "client_name"),
        "prospect_name": prospect_name or _field(record, "prospectName", "prospect_name"),
        "assigned_to": _field(record, "assignedTo", "assigned_to"),
        "metadata": {"original": record},
    }


def task_to_item(
    task: dict,
    client_name: str | None = None,
    prospect_name: str | None = None,
    clock: Clock | None = None,
) -> TaskItem:
    return _task_like(TaskItem, task, client_name, prospect_name, clock)


def follow_up_to_item(
    follow_up: dict,
    client_name: str | None = None,
    prospect_name: str | None = None,
    clock: Clock | None = None,
) -> FollowUpItem:
    """Follow-ups carry a due date and completion flag, like tasks."""

    return _task_like(FollowUpItem, follow_up, client_name, prospect_name, clock)


def _task_like(
    cls: type[TaskItem],
    record: dict,
    client_name: str | None,
    prospect_name: str | None,
    clock: Clock | None,
) -> TaskItem:
    priority = _priority(record.get("priority"))
    due_date = parse_optional(_field(record, "dueDate", "due_date"))
    completed = bool(record.get("completed", False))
    return cls(
        **_common(record, clock, client_name, prospect_name),
        priority=priority,
        due_date=due_date,
        completed=completed,
        urgency=classify(priority, due_date=due_date, completed=completed, clock=clock),
    )


def alert_to_item(
    alert: dict,
    client_name: str | None = None,
    prospect_name: str | None = None,
    clock: Clock | None = None,
) -> AlertItem:
    """Alerts take their priority from severity rather than a priority field."""

    severity = _severity(alert.get("severity"))
    priority = _SEVERITY_PRIORITY.get(severity, "medium")
    action_required = bool(_field(alert, "actionRequired", "action_required", False))
    return AlertItem(
        **_common(alert, clock, client_name, prospect_name),
        priority=priority,
        severity=severity,
        read=bool(alert.get("read", False)),
        action_required=action_required,
        urgency=classify(priority, severity=severity, action_required=action_required, clock=clock),
    )


def appointment_to_item(
    appointment: dict,
    client_name: str | None = None,
    prospect_name: str | None = None,
    clock: Clock | None = None,
) -> AppointmentItem:
    priority = _priority(appointment.get("priority"))
    start_time = parse_optional(_field(appointment, "startTime", "start_time"))
    return AppointmentItem(
        **_common(appointment, clock, client_name, prospect_name),
        priority=priority,
        start_time=start_time,
        end_time=parse_optional(_field(appointment, "endTime", "end_time")),
        location=appointment.get("location"),
        appointment_type=appointment.get("type"),
        urgency=classify(priority, start_time=start_time, clock=clock),
    )


def to_appointment_like(appointment: dict, client_name: str | None = None) -> AppointmentLike:
    """Reduce a raw appointment record to the shape used for scheduling."""

    start_raw = _field(appointment, "startTime", "start_time")
    end_raw = _field(appointment, "endTime", "end_time")
    if start_raw is None or end_raw is None:
        raise ValueError(f"Appointment {appointment.get('id')!r} needs both start and end times")

    priority = appointment.get("priority")
    return AppointmentLike(
        id=appointment.get("id"),
        title=str(appointment.get("title") or ""),
        description=appointment.get("description"),
        start_time=parse_timestamp(start_raw),
        end_time=parse_timestamp(end_raw),
        type=appointment.get("type") or "meeting",
        priority=priority if priority in ("low", "medium", "high") else "medium",
        client_name=client_name or _field(appointment, "clientName", "client_name"),
        location=appointment.get("location"),
    )


_CONVERTERS: dict[str, Callable[..., UnifiedItem]] = {
    "task": task_to_item,
    "alert": alert_to_item,
    "appointment": appointment_to_item,
    "follow-up": follow_up_to_item,
}


def to_unified_item(
    record: dict,
    item_type: str,
    client_name: str | None = None,
    prospect_name: str | None = None,
    clock: Clock | None = None,
) -> UnifiedItem:
    """Convert a raw source record of ``item_type`` into its unified variant."""

    converter = _CONVERTERS.get(item_type)
    if converter is None:
        raise ValueError(f"Unknown item type '{item_type}', expected one of {list(ITEM_TYPES)}")
    return converter(record, client_name=client_name, prospect_name=prospect_name, clock=clock)


def _reclassify(item: UnifiedItem, clock: Clock | None) -> str:
    if isinstance(item, TaskItem):
        return classify(item.priority, due_date=item.due_date, completed=item.completed, clock=clock)
    if isinstance(item, AlertItem):
        return classify(item.priority, severity=item.severity, action_required=item.action_required, clock=clock)
    if isinstance(item, AppointmentItem):
        return classify(item.priority, start_time=item.start_time, clock=clock)
    return classify(item.priority, clock=clock)


def refresh(item: UnifiedItem, clock: Clock | None = None, **changes: Any) -> UnifiedItem:
    """Return a copy of ``item`` with ``changes`` applied and derived fields recomputed.

    Timestamps are parsed as on normalization, alert priority follows severity
    and urgency is always reclassified.
    """

    if "urgency" in changes:
        raise ValueError("urgency is derived and cannot be set directly")
    for field in _TIMESTAMP_FIELDS:
        if field in changes:
            changes[field] = parse_optional(changes[field])
    if "created_at" in changes and changes["created_at"] is None:
        changes["created_at"] = resolve(clock).now()
    if "description" in changes:
        changes["description"] = _text(changes["description"])

    updated = replace(item, **changes) if changes else item
    if isinstance(updated, AlertItem):
        severity = _severity(updated.severity)
        updated = replace(updated, severity=severity, priority=_SEVERITY_PRIORITY.get(severity, "medium"))
    else:
        updated = replace(updated, priority=_priority(updated.priority))
    return replace(updated, urgency=_reclassify(updated, clock))
