"""
Feedback Orchestrator — Caller-Facing Analysis Pipeline

Runs the three detectors over the same text, then gates, ranks
and summarizes their candidates:

  text → [FallacyDetector, ToneAnalyzer, ClarityAnalyzer]
       → gate(sensitivity) → rank → affirmation / summary / readiness

The orchestrator holds no per-request state. Detectors are injected
through the constructor; the module singletons are the defaults.

A detector failure is NOT the same as "no issues". It surfaces as
AnalysisUnavailableError so callers can let the user post while
showing that analysis did not run.
"""

from __future__ import annotations

import time
from typing import Optional, Union

from reasonbridge.aggregator import (
    AFFIRMATION_CONFIDENCE,
    coerce_sensitivity,
    gate,
    rank,
    ready_to_post,
)
from reasonbridge.clarity import clarity_analyzer
from reasonbridge.exceptions import AnalysisUnavailableError
from reasonbridge.fallacy import fallacy_detector
from reasonbridge.logging import get_logger
from reasonbridge.models import (
    FeedbackCandidate,
    FeedbackType,
    PreviewFeedbackResult,
    Sensitivity,
)
from reasonbridge.tone import tone_analyzer

logger = get_logger("detector")

# Responses shorter than this (after trimming) are not "substantive"
# and never receive an affirmation.
SUBSTANTIVE_MIN_LENGTH = 20

SUMMARY_CONSTRUCTIVE = "Your response looks constructive!"
SUMMARY_NO_ISSUES = "No issues detected"


def build_affirmation() -> FeedbackCandidate:
    return FeedbackCandidate(
        type=FeedbackType.AFFIRMATION,
        suggestion_text=(
            "Your response contributes to constructive dialogue. Thank you for "
            "engaging thoughtfully with this discussion."
        ),
        reasoning="No fallacies, inflammatory language, or unsourced claims were detected.",
        confidence_score=AFFIRMATION_CONFIDENCE,
    )


def is_substantive(text: str) -> bool:
    return isinstance(text, str) and len(text.strip()) >= SUBSTANTIVE_MIN_LENGTH


def summarize(issue_count: int, substantive: bool) -> str:
    if issue_count:
        return f"Found {issue_count} areas for improvement"
    return SUMMARY_CONSTRUCTIVE if substantive else SUMMARY_NO_ISSUES


class FeedbackOrchestrator:
    """Combines detector output into the caller-facing feedback payload."""

    def __init__(self, fallacy=None, tone=None, clarity=None):
        self._detectors = (
            ("fallacy", fallacy or fallacy_detector),
            ("tone", tone or tone_analyzer),
            ("clarity", clarity or clarity_analyzer),
        )

    def _run_detectors(self, text: str) -> list[FeedbackCandidate]:
        candidates = []
        for name, detector in self._detectors:
            try:
                result = detector.analyze(text)
            except Exception as exc:
                logger.error(
                    f"{name} detector failed",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                    exc_info=True,
                )
                raise AnalysisUnavailableError(f"{name} analysis unavailable") from exc
            if result is not None:
                candidates.append(result)
        return candidates

    def analyze_content(self, text: str) -> list[FeedbackCandidate]:
        """Every detector's candidate, ranked, with no threshold applied."""
        return rank(self._run_detectors(text))

    def preview(
        self,
        text: str,
        sensitivity: Union[Sensitivity, str, None] = Sensitivity.MEDIUM,
        limit: Optional[int] = None,
    ) -> PreviewFeedbackResult:
        """
        Analyze text for live feedback. Never persists anything.

        Args:
            text: The draft response.
            sensitivity: LOW, MEDIUM (default, 0.80 floor) or HIGH.
            limit: Optional cap on the number of returned issues.

        Returns:
            PreviewFeedbackResult with gated, ranked candidates.

        Raises:
            AnalysisUnavailableError if any detector fails.
        """
        level = coerce_sensitivity(sensitivity)

        start = time.perf_counter()
        raw = self._run_detectors(text)
        analysis_time_ms = round((time.perf_counter() - start) * 1000, 3)

        issues = rank(gate(raw, level), limit=limit)
        substantive = is_substantive(text)

        if issues:
            feedback = issues
        elif substantive:
            feedback = [build_affirmation()]
        else:
            feedback = []

        result = PreviewFeedbackResult(
            feedback=feedback,
            ready_to_post=ready_to_post(issues),
            summary=summarize(len(issues), substantive),
            analysis_time_ms=analysis_time_ms,
            sensitivity=level,
            issue_count=len(issues),
        )

        logger.debug(
            f"Preview complete: {len(issues)} issue(s) of {len(raw)} candidate(s)",
            extra={
                "sensitivity": level.value,
                "candidates": len(raw),
                "ready_to_post": result.ready_to_post,
                "duration_ms": analysis_time_ms,
            },
        )
        return result

    def candidates_for_request(
        self,
        text: str,
        sensitivity: Union[Sensitivity, str, None] = Sensitivity.MEDIUM,
    ) -> list[FeedbackCandidate]:
        """What a persisted feedback request stores: gated issues, or one affirmation."""
        return self.preview(text, sensitivity).feedback


feedback_orchestrator = FeedbackOrchestrator()
