"""Evaluate the show-up heuristic against a labelled appointment history."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.adapters import csv_adapter
from activity_engine.calibration import compare_weights, evaluate_show_up
from activity_engine.config import ShowUpWeights


def _load_overrides(path: Path | None) -> ShowUpWeights | None:
    if path is None:
        return None
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Weight overrides must be a JSON object")
    return replace(ShowUpWeights(), **payload)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run activity-engine show-up calibration")
    parser.add_argument("--data", required=True, help="Path to CSV appointment history")
    parser.add_argument("--weights", help="Optional JSON file overriding scalar ShowUpWeights fields")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    history = csv_adapter.parse(args.data)
    report = {"baseline": evaluate_show_up(history)}

    candidate_weights = _load_overrides(Path(args.weights) if args.weights else None)
    if candidate_weights is not None:
        report["candidate"] = evaluate_show_up(history, weights=candidate_weights)
        report["comparison"] = compare_weights(report["baseline"], report["candidate"])

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "calibration_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved calibration report to {out_path}")


if __name__ == "__main__":
    main()
