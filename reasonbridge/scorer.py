"""
Clarity Scorer — Composite Clarity Metrics

Computes ClarityMetrics from a set of persisted feedback rows.

Only rows that are:
  - of type UNSOURCED or BIAS
  - at or above the 0.80 display threshold
  - actually displayed to the user
contribute. Everything else is ignored outright, not down-weighted.

    sourcing    = max(0, 1 - 0.20 * unsourced)
    neutrality  = max(0, 1 - 0.15 * bias)
    specificity = supplied signal, else the 0.85 baseline
    overall     = mean of the three
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Union

from reasonbridge.aggregator import DISPLAY_THRESHOLD, clamp_confidence
from reasonbridge.models import ClarityMetrics, Feedback, FeedbackType

SOURCING_PENALTY = 0.20
NEUTRALITY_PENALTY = 0.15
SPECIFICITY_BASELINE = 0.85

NO_ISSUES_SUMMARY = "No clarity issues detected"

CLARITY_LABELS = (
    (0.90, "Excellent"),
    (0.80, "Good"),
    (0.70, "Fair"),
    (0.60, "Needs Improvement"),
)

SpecificitySource = Union[float, Callable[[], float], None]


def clarity_label(score: float) -> str:
    """Map a score to its band. Lower bounds are inclusive."""
    for floor, label in CLARITY_LABELS:
        if score >= floor:
            return label
    return "Poor"


def _counts_toward_clarity(item: Feedback) -> bool:
    return (
        item.type in (FeedbackType.UNSOURCED, FeedbackType.BIAS)
        and item.confidence_score >= DISPLAY_THRESHOLD
        and item.displayed_to_user
    )


def _resolve_specificity(specificity: SpecificitySource) -> float:
    if specificity is None:
        return SPECIFICITY_BASELINE
    value = specificity() if callable(specificity) else specificity
    return clamp_confidence(float(value))


def calculate_clarity_metrics(
    feedback: Iterable[Feedback],
    metrics: Optional[Mapping[str, float]] = None,
    specificity: SpecificitySource = None,
) -> ClarityMetrics:
    """
    Derive ClarityMetrics from the current feedback set.

    Args:
        feedback: Persisted feedback rows for one response.
        metrics: Externally supplied sub-scores (``sourcing_score``,
            ``neutrality_score``, ``specificity_score``). Any key given
            here overrides the computed value.
        specificity: Specificity signal (a float, or a zero-arg callable
            producing one). Defaults to the 0.85 baseline.

    Returns:
        ClarityMetrics. An empty filtered set with no supplied metrics
        yields the "no issues" state rather than an error.
    """
    relevant = [f for f in feedback if _counts_toward_clarity(f)]
    unsourced = sum(1 for f in relevant if f.type == FeedbackType.UNSOURCED)
    bias = sum(1 for f in relevant if f.type == FeedbackType.BIAS)
    issues = {"unsourced": unsourced, "bias": bias, "total": unsourced + bias}

    scores = {
        "sourcing_score": clamp_confidence(1.0 - SOURCING_PENALTY * unsourced),
        "neutrality_score": clamp_confidence(1.0 - NEUTRALITY_PENALTY * bias),
        "specificity_score": _resolve_specificity(specificity),
    }
    if metrics:
        for key in scores:
            if metrics.get(key) is not None:
                scores[key] = clamp_confidence(float(metrics[key]))

    overall = clamp_confidence(sum(scores.values()) / 3)
    has_issues = issues["total"] > 0

    if has_issues:
        summary = (
            f"{issues['total']} clarity issue(s) detected: "
            f"{unsourced} unsourced claim(s), {bias} biased framing(s)"
        )
    else:
        summary = NO_ISSUES_SUMMARY

    return ClarityMetrics(
        sourcing_score=scores["sourcing_score"],
        neutrality_score=scores["neutrality_score"],
        specificity_score=scores["specificity_score"],
        overall_clarity_score=overall,
        issues_detected=issues,
        label=clarity_label(overall),
        summary=summary,
        has_issues=has_issues,
    )
