"""Unified feed assembled from a snapshot of source records."""

from __future__ import annotations

import logging
from typing import Any

from activity_engine.clock import Clock, FixedClock, resolve
from activity_engine.filtering import filter_items
from activity_engine.normalizer import to_unified_item
from activity_engine.ordering import count_by_urgency, group_by_urgency, sort_items
from activity_engine.schema import Filters, Snapshot, UnifiedItem

logger = logging.getLogger(__name__)


def normalize_snapshot(snapshot: Snapshot, clock: Clock | None = None) -> list[UnifiedItem]:
    """Convert every record in ``snapshot`` into a unified item."""

    sources = (
        ("task", snapshot.tasks),
        ("alert", snapshot.alerts),
        ("appointment", snapshot.appointments),
        ("follow-up", snapshot.follow_ups),
    )
    items: list[UnifiedItem] = []
    for item_type, records in sources:
        for record in records:
            client_id = record.get("clientId", record.get("client_id"))
            prospect_id = record.get("prospectId", record.get("prospect_id"))
            items.append(
                to_unified_item(
                    record,
                    item_type,
                    client_name=snapshot.client_names.get(client_id),
                    prospect_name=snapshot.prospect_names.get(prospect_id),
                    clock=clock,
                )
            )
    logger.debug("Normalized %d records into unified items", len(items))
    return items


def build_feed(snapshot: Snapshot, filters: Filters | None = None, clock: Clock | None = None) -> list[UnifiedItem]:
    """Normalize, filter and order a snapshot into a single feed."""

    # One reading of the clock keeps urgency and date-range filters consistent.
    pinned = FixedClock(resolve(clock).now())
    items = normalize_snapshot(snapshot, pinned)
    return sort_items(filter_items(items, filters, pinned))


def build_timeline(snapshot: Snapshot, filters: Filters | None = None, clock: Clock | None = None) -> dict[str, Any]:
    feed = build_feed(snapshot, filters, clock)
    return {
        "groups": group_by_urgency(feed),
        "counts": count_by_urgency(feed),
        "total": len(feed),
    }
