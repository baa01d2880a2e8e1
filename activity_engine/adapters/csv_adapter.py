"""CSV adapter for labelled appointment history."""

from __future__ import annotations

import csv
import logging

from activity_engine.clock import parse_optional, parse_timestamp
from activity_engine.schema import APPOINTMENT_TYPES, HistoricalAppointment

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"title", "start_time", "end_time", "type", "attended"}
_VALID_PRIORITIES = {"low", "medium", "high"}
_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"0", "false", "no", "n"}


def _parse_bool(value: str, row_number: int) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Row {row_number}: invalid attended flag '{value}'")


def _parse_row(row: dict, row_number: int) -> HistoricalAppointment:
    missing = sorted(field for field in _REQUIRED_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        start_time = parse_timestamp(row["start_time"])
        end_time = parse_timestamp(row["end_time"])
        booked_at = parse_optional(row.get("booked_at"))
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: malformed timestamp") from exc

    kind = row["type"].strip()
    if kind not in APPOINTMENT_TYPES:
        raise ValueError(f"Row {row_number}: invalid type '{kind}'")

    priority = (row.get("priority") or "medium").strip()
    if priority not in _VALID_PRIORITIES:
        raise ValueError(f"Row {row_number}: invalid priority '{priority}'")

    client_raw = row.get("client_name")
    return HistoricalAppointment(
        title=row["title"].strip(),
        start_time=start_time,
        end_time=end_time,
        type=kind,
        priority=priority,
        client_name=client_raw.strip() if client_raw else None,
        attended=_parse_bool(row["attended"], row_number),
        booked_at=booked_at,
    )


def parse(file_path: str) -> list[HistoricalAppointment]:
    """Parse CSV file into a list of historical appointments."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        appointments: list[HistoricalAppointment] = []
        for row_number, row in enumerate(reader, start=2):
            appointments.append(_parse_row(row, row_number))

    logger.debug("Loaded %d historical appointments from %s", len(appointments), file_path)
    return appointments
