"""Streamlit demo UI for activity-engine."""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from typing import Any

from activity_engine.adapters import json_adapter
from activity_engine.clock import FixedClock
from activity_engine.hub import build_timeline
from activity_engine.normalizer import to_appointment_like
from activity_engine.recommendation import suggest_appointment
from activity_engine.risk_model import assess_show_up
from activity_engine.scheduling import FallbackPolicy
from activity_engine.schema import ITEM_TYPES, PRIORITY_LEVELS, URGENCY_LEVELS, Filters, Snapshot
from activity_engine.templates import agenda_template

TIER_LABELS = {"now": "Now", "next": "Next", "scheduled": "Scheduled"}


def _parse_uploaded(uploaded_file) -> Snapshot:
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return json_adapter.parse(temp_path)


def _item_row(item) -> dict[str, Any]:
    return {
        "type": item.type,
        "title": item.title,
        "priority": item.priority,
        "when": item.effective_time.strftime("%Y-%m-%d %H:%M"),
        "client": item.client_name or item.prospect_name or "",
    }


def run_engine(snapshot: Snapshot, filters: Filters, now: datetime, preferred: date | None, policy: str) -> dict[str, Any]:
    """Run the feed and scheduling steps and return a UI-friendly payload."""

    clock = FixedClock(now)
    timeline = build_timeline(snapshot, filters, clock)

    appointments = [
        to_appointment_like(record, snapshot.client_names.get(record.get("clientId")))
        for record in snapshot.appointments
    ]
    suggestion = suggest_appointment(appointments, preferred, clock=clock, fallback=FallbackPolicy(policy))
    assessments = [
        {"title": appointment.title, **vars(assess_show_up(appointment, clock=clock))}
        for appointment in appointments
    ]

    return {
        "counts": timeline["counts"],
        "groups": {level: [_item_row(item) for item in items] for level, items in timeline["groups"].items()},
        "suggestion": suggestion,
        "assessments": assessments,
        "agenda": agenda_template(appointments[0]) if appointments else None,
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Activity Engine Demo", layout="wide")
    st.title("Activity Engine · Task Hub Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload snapshot", type=["json"])
        use_demo = st.checkbox("Load demo snapshot", value=True)
        as_of_date = st.date_input("As of date", value=date(2026, 10, 19))
        as_of_hour = st.slider("As of hour", min_value=0, max_value=23, value=10)
        urgency = st.multiselect("Urgency", options=list(URGENCY_LEVELS))
        types = st.multiselect("Type", options=list(ITEM_TYPES))
        priority = st.multiselect("Priority", options=list(PRIORITY_LEVELS))
        status = st.selectbox("Status", options=["all", "pending", "completed", "read"])
        query = st.text_input("Search")
        preferred = st.date_input("Preferred appointment date", value=None)
        policy = st.selectbox("Fallback policy", options=[p.value for p in FallbackPolicy])
        run = st.button("Run engine", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Run engine**.")
        return

    try:
        if use_demo:
            snapshot = json_adapter.parse("examples/sample_snapshot.json")
        elif uploaded is not None:
            snapshot = _parse_uploaded(uploaded)
        else:
            st.error("Please upload a JSON snapshot or enable 'Load demo snapshot'.")
            return

        filters = Filters(
            urgency=tuple(urgency),
            types=tuple(types),
            priority=tuple(priority),
            status=status,
            search_query=query or None,
        )
        now = datetime.combine(as_of_date, datetime.min.time()).replace(hour=as_of_hour)
        result = run_engine(snapshot, filters, now, preferred, policy)

        st.subheader("A) Timeline")
        columns = st.columns(len(URGENCY_LEVELS))
        for column, level in zip(columns, URGENCY_LEVELS):
            column.metric(TIER_LABELS[level], result["counts"][level])
            column.table(result["groups"][level] or [{"title": "Nothing here"}])

        st.subheader("B) Suggested Appointment")
        suggestion = result["suggestion"]
        if suggestion is None:
            st.write("No free slot found under the selected policy.")
        else:
            st.write(
                f"{suggestion.date} {suggestion.start_time}–{suggestion.end_time} · "
                f"{suggestion.type} ({suggestion.confidence:.0%} confidence)"
            )
            st.caption(suggestion.rationale)

        st.subheader("C) Show-up Risk")
        st.table(result["assessments"])

        if result["agenda"]:
            st.subheader("D) Agenda Draft")
            st.code(result["agenda"], language=None)

    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
