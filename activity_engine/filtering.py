"""Predicate filtering over unified items."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from activity_engine.clock import Clock, resolve
from activity_engine.schema import Filters, UnifiedItem
from activity_engine.urgency import end_of_week, start_of_day


def _matches_status(item: UnifiedItem, status: str) -> bool:
    completed = getattr(item, "completed", False)
    read = getattr(item, "read", False)
    if status == "pending":
        return not (completed or read)
    if status == "completed":
        return completed
    if status == "read":
        return read
    return True


def _matches_query(item: UnifiedItem, query: str) -> bool:
    needle = query.lower()
    haystack = (item.title, item.description, item.client_name, item.prospect_name)
    return any(value is not None and needle in str(value).lower() for value in haystack)


def _date_bounds(criteria: Filters, now: datetime) -> tuple[datetime | None, datetime | None]:
    today = start_of_day(now)
    if criteria.date_range == "today":
        return today, today + timedelta(days=1, microseconds=-1)
    if criteria.date_range == "this-week":
        week_end = end_of_week(today)
        return start_of_day(week_end) - timedelta(days=6), week_end
    if criteria.date_range == "this-month":
        month_start = today.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        return month_start, next_month - timedelta(microseconds=1)
    if criteria.date_range == "custom":
        return criteria.custom_start, criteria.custom_end
    return None, None


def matches(item: UnifiedItem, criteria: Filters, now: datetime | None = None) -> bool:
    """Return True when ``item`` satisfies every criterion that is set."""

    if criteria.urgency and item.urgency not in criteria.urgency:
        return False
    if criteria.types and item.type not in criteria.types:
        return False
    if criteria.priority and item.priority not in criteria.priority:
        return False

    if criteria.entity_type == "client" and item.client_id is None:
        return False
    if criteria.entity_type == "prospect" and item.prospect_id is None:
        return False

    if criteria.client_id is not None and item.client_id != criteria.client_id:
        return False
    if criteria.prospect_id is not None and item.prospect_id != criteria.prospect_id:
        return False

    if not _matches_status(item, criteria.status):
        return False

    if criteria.search_query and not _matches_query(item, criteria.search_query):
        return False

    if criteria.date_range:
        lower, upper = _date_bounds(criteria, now or resolve(None).now())
        moment = item.effective_time
        if lower is not None and moment < lower:
            return False
        if upper is not None and moment > upper:
            return False

    return True


def filter_items(
    items: Iterable[UnifiedItem],
    criteria: Filters | None = None,
    clock: Clock | None = None,
) -> list[UnifiedItem]:
    """Return the items matching ``criteria`` in their original order."""

    if criteria is None:
        return list(items)
    now = resolve(clock).now() if criteria.date_range else None
    return [item for item in items if matches(item, criteria, now)]
