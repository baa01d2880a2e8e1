"""Ordering and urgency grouping of unified items."""

from __future__ import annotations

from typing import Iterable

from activity_engine.schema import URGENCY_LEVELS, UnifiedItem

_URGENCY_RANK = {"now": 0, "next": 1, "scheduled": 2}
_PRIORITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def sort_key(item: UnifiedItem) -> tuple:
    return (
        _URGENCY_RANK[item.urgency],
        _PRIORITY_RANK.get(item.priority, _PRIORITY_RANK["medium"]),
        item.effective_time,
    )


def sort_items(items: Iterable[UnifiedItem]) -> list[UnifiedItem]:
    """Order by urgency tier, then priority tier, then earliest timestamp.

    ``sorted`` is stable, so full ties keep their input order.
    """

    return sorted(items, key=sort_key)


def group_by_urgency(items: Iterable[UnifiedItem]) -> dict[str, list[UnifiedItem]]:
    grouped: dict[str, list[UnifiedItem]] = {level: [] for level in URGENCY_LEVELS}
    for item in items:
        if item.urgency not in grouped:
            raise ValueError(f"Item {item.id} has unknown urgency '{item.urgency}'")
        grouped[item.urgency].append(item)
    return {level: sort_items(bucket) for level, bucket in grouped.items()}


def count_by_urgency(items: Iterable[UnifiedItem]) -> dict[str, int]:
    counts = {level: 0 for level in URGENCY_LEVELS}
    for item in items:
        counts[item.urgency] += 1
    return counts
