"""Persisted filter store interface and query-string codec."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Protocol
from urllib.parse import parse_qs, urlencode

from activity_engine.clock import parse_optional
from activity_engine.schema import (
    DATE_RANGES,
    ENTITY_SCOPES,
    ITEM_TYPES,
    PRIORITY_LEVELS,
    STATUS_FILTERS,
    URGENCY_LEVELS,
    Filters,
)

FILTER_STORAGE_KEY = "task-hub-filters"

_LIST_FIELDS = {
    "urgency": ("urgency", URGENCY_LEVELS),
    "type": ("types", ITEM_TYPES),
    "priority": ("priority", PRIORITY_LEVELS),
}


class FilterStore(Protocol):
    """Loads and saves the current ``Filters`` under ``FILTER_STORAGE_KEY``."""

    def load(self) -> Filters: ...

    def save(self, filters: Filters) -> None: ...

    def clear(self) -> None: ...


class InMemoryFilterStore:
    def __init__(self) -> None:
        self._values: dict[str, Filters] = {}

    def load(self) -> Filters:
        return self._values.get(FILTER_STORAGE_KEY, Filters())

    def save(self, filters: Filters) -> None:
        self._values[FILTER_STORAGE_KEY] = filters

    def clear(self) -> None:
        self._values.pop(FILTER_STORAGE_KEY, None)


def filters_to_query(filters: Filters) -> str:
    params: list[tuple[str, str]] = []
    for key, (attr, allowed) in _LIST_FIELDS.items():
        params.extend((key, value) for value in allowed if value in getattr(filters, attr))
    if filters.entity_type != "all":
        params.append(("entityType", filters.entity_type))
    if filters.client_id is not None:
        params.append(("clientId", str(filters.client_id)))
    if filters.prospect_id is not None:
        params.append(("prospectId", str(filters.prospect_id)))
    if filters.status != "all":
        params.append(("status", filters.status))
    if filters.search_query:
        params.append(("q", filters.search_query))
    if filters.date_range in DATE_RANGES:
        params.append(("dateRange", filters.date_range))
    if filters.custom_start is not None:
        params.append(("customStart", filters.custom_start.isoformat()))
    if filters.custom_end is not None:
        params.append(("customEnd", filters.custom_end.isoformat()))
    return urlencode(params)


def _int_or_none(values: list[str]) -> int | None:
    try:
        return int(values[0])
    except (IndexError, ValueError):
        return None


def _timestamp_or_none(values: list[str]) -> datetime | None:
    try:
        return parse_optional(values[0])
    except (IndexError, ValueError):
        return None


def filters_from_query(query: str) -> Filters:
    """Rebuild ``Filters`` from a query string, dropping unrecognised values."""

    params = parse_qs(query.lstrip("?"))
    filters = Filters()

    for key, (attr, allowed) in _LIST_FIELDS.items():
        values = tuple(value for value in params.get(key, []) if value in allowed)
        if values:
            filters = replace(filters, **{attr: values})

    entity_type = params.get("entityType", [""])[0]
    if entity_type in ENTITY_SCOPES:
        filters = replace(filters, entity_type=entity_type)
    status = params.get("status", [""])[0]
    if status in STATUS_FILTERS:
        filters = replace(filters, status=status)
    date_range = params.get("dateRange", [""])[0]

    return replace(
        filters,
        client_id=_int_or_none(params.get("clientId", [])),
        prospect_id=_int_or_none(params.get("prospectId", [])),
        search_query=params.get("q", [None])[0],
        date_range=date_range if date_range in DATE_RANGES else None,
        custom_start=_timestamp_or_none(params.get("customStart", [])),
        custom_end=_timestamp_or_none(params.get("customEnd", [])),
    )
