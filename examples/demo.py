"""Demo script for activity-engine."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.adapters.json_adapter import parse
from activity_engine.hub import build_timeline
from activity_engine.normalizer import to_appointment_like
from activity_engine.recommendation import suggest_appointment
from activity_engine.risk_model import assess_show_up


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    snapshot = parse("examples/sample_snapshot.json")
    timeline = build_timeline(snapshot)
    print("Counts:", timeline["counts"])
    for level, items in timeline["groups"].items():
        print(f"[{level}]", [item.title for item in items])

    appointments = [
        to_appointment_like(record, snapshot.client_names.get(record.get("clientId")))
        for record in snapshot.appointments
    ]
    print("Suggestion:", suggest_appointment(appointments))
    for appointment in appointments:
        print(appointment.title, "->", assess_show_up(appointment))


if __name__ == "__main__":
    main()
