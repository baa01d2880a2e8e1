"""Offline evaluation of the show-up heuristic against attendance history."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from sklearn.metrics import accuracy_score, brier_score_loss, roc_auc_score

from activity_engine.clock import Clock, FixedClock
from activity_engine.config import ShowUpWeights
from activity_engine.risk_model import assess_show_up
from activity_engine.schema import HistoricalAppointment

logger = logging.getLogger(__name__)

_RISK_LEVELS = ("low", "medium", "high")


def _safe_roc_auc(y_true: np.ndarray, scores: np.ndarray) -> float:
    if len(np.unique(y_true)) < 2:
        return 0.5
    return float(roc_auc_score(y_true, scores))


def score_history(
    history: list[HistoricalAppointment],
    clock: Clock | None = None,
    weights: ShowUpWeights | None = None,
) -> tuple[np.ndarray, np.ndarray, list[str]]:
    """Return (likelihoods, attended labels, risk levels) for ``history``."""

    scores: list[float] = []
    labels: list[int] = []
    levels: list[str] = []
    for appointment in history:
        as_of = FixedClock(appointment.booked_at) if appointment.booked_at is not None else clock
        assessment = assess_show_up(appointment, clock=as_of, weights=weights)
        scores.append(assessment.likelihood)
        labels.append(1 if appointment.attended else 0)
        levels.append(assessment.risk_level)
    return np.asarray(scores, dtype=float), np.asarray(labels, dtype=int), levels


def evaluate_show_up(
    history: list[HistoricalAppointment],
    clock: Clock | None = None,
    weights: ShowUpWeights | None = None,
) -> dict[str, Any]:
    """Report how well the heuristic likelihood separates attended from missed."""

    if not history:
        return {
            "n_appointments": 0,
            "roc_auc": 0.5,
            "brier": 0.0,
            "accuracy": 0.0,
            "attendance_by_risk": {},
        }

    scores, labels, levels = score_history(history, clock, weights)
    predicted = (scores >= 0.5).astype(int)

    attendance_by_risk: dict[str, dict[str, float]] = {}
    level_array = np.asarray(levels)
    for level in _RISK_LEVELS:
        mask = level_array == level
        if not mask.any():
            continue
        attendance_by_risk[level] = {
            "count": int(mask.sum()),
            "attendance_rate": float(labels[mask].mean()),
            "mean_likelihood": float(scores[mask].mean()),
        }

    report = {
        "n_appointments": int(len(labels)),
        "roc_auc": _safe_roc_auc(labels, scores),
        "brier": float(brier_score_loss(labels, scores)),
        "accuracy": float(accuracy_score(labels, predicted)),
        "attendance_by_risk": attendance_by_risk,
    }
    logger.debug("Evaluated %d historical appointments", report["n_appointments"])
    return report


def compare_weights(baseline: dict, candidate: dict) -> dict:
    """Metric deltas of a candidate weight table against the baseline report."""

    return {
        "roc_auc_delta": candidate.get("roc_auc", 0.5) - baseline.get("roc_auc", 0.5),
        "brier_reduction": baseline.get("brier", 0.0) - candidate.get("brier", 0.0),
        "accuracy_delta": candidate.get("accuracy", 0.0) - baseline.get("accuracy", 0.0),
    }
