"""JSON adapter for source-record snapshots."""

from __future__ import annotations

import json
import logging

from activity_engine.clock import parse_optional
from activity_engine.schema import Snapshot

logger = logging.getLogger(__name__)

_COLLECTIONS = {
    "tasks": "tasks",
    "alerts": "alerts",
    "appointments": "appointments",
    "followUps": "follow_ups",
}
_TIMESTAMP_FIELDS = ("createdAt", "dueDate", "startTime", "endTime")


def _check_item(item, collection: str, index: int) -> dict:
    if not isinstance(item, dict):
        raise ValueError(f"{collection} item {index}: expected an object")
    if item.get("id") is None:
        raise ValueError(f"{collection} item {index}: missing required field 'id'")
    if not item.get("title"):
        raise ValueError(f"{collection} item {index}: missing required field 'title'")

    for field in _TIMESTAMP_FIELDS:
        try:
            parse_optional(item.get(field))
        except ValueError as exc:
            raise ValueError(f"{collection} item {index}: malformed {field}") from exc
    return item


def _names(payload: dict, key: str) -> dict[int, str]:
    raw = payload.get(key) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{key}' must map ids to display names")
    try:
        return {int(entity_id): str(name) for entity_id, name in raw.items()}
    except ValueError as exc:
        raise ValueError(f"'{key}' contains a non-numeric id") from exc


def parse(file_path: str) -> Snapshot:
    """Parse a JSON snapshot file into source records and display names."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object of record collections")

    collections: dict[str, list[dict]] = {}
    for key, attr in _COLLECTIONS.items():
        items = payload.get(key) or []
        if not isinstance(items, list):
            raise ValueError(f"'{key}' must be a list of objects")
        collections[attr] = [_check_item(item, key, i) for i, item in enumerate(items, start=1)]

    snapshot = Snapshot(
        **collections,
        client_names=_names(payload, "clients"),
        prospect_names=_names(payload, "prospects"),
    )
    logger.debug(
        "Loaded snapshot from %s: %d tasks, %d alerts, %d appointments, %d follow-ups",
        file_path,
        len(snapshot.tasks),
        len(snapshot.alerts),
        len(snapshot.appointments),
        len(snapshot.follow_ups),
    )
    return snapshot
