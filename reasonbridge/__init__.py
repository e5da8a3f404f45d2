"""
ReasonBridge — Rule-Based Feedback for Discussion Responses

Deterministic pattern detectors that turn response text into typed,
confidence-scored feedback, plus the aggregation rules that decide
what a user sees.

Public API:
  - fallacy_detector:      FALLACY candidates (7 fallacy groups)
  - tone_analyzer:         INFLAMMATORY candidates (attacks, hostile tone)
  - clarity_analyzer:      UNSOURCED / BIAS candidates
  - feedback_orchestrator: preview(), readiness verdict, summary
  - calculate_clarity_metrics / clarity_label
  - FeedbackService:       persisted feedback lifecycle
  - summarize_feedback:    analytics rollup

Usage:
    from reasonbridge import feedback_orchestrator
    result = feedback_orchestrator.preview("By that logic, everyone knows that...")
"""

__version__ = "1.0.0"

from reasonbridge.models import (
    ClarityMetrics,
    Feedback,
    FeedbackCandidate,
    FeedbackType,
    HelpfulRating,
    PreviewFeedbackResult,
    Sensitivity,
)
from reasonbridge.aggregator import DISPLAY_THRESHOLD, SENSITIVITY_THRESHOLDS
from reasonbridge.fallacy import FallacyDetector, fallacy_detector
from reasonbridge.tone import ToneAnalyzer, tone_analyzer
from reasonbridge.clarity import ClarityAnalyzer, clarity_analyzer
from reasonbridge.scorer import calculate_clarity_metrics, clarity_label
from reasonbridge.detector import FeedbackOrchestrator, feedback_orchestrator
from reasonbridge.analytics import FeedbackAnalytics, summarize_feedback
from reasonbridge.service import FeedbackService

__all__ = [
    "ClarityMetrics",
    "Feedback",
    "FeedbackCandidate",
    "FeedbackType",
    "HelpfulRating",
    "PreviewFeedbackResult",
    "Sensitivity",
    "DISPLAY_THRESHOLD",
    "SENSITIVITY_THRESHOLDS",
    "FallacyDetector",
    "fallacy_detector",
    "ToneAnalyzer",
    "tone_analyzer",
    "ClarityAnalyzer",
    "clarity_analyzer",
    "calculate_clarity_metrics",
    "clarity_label",
    "FeedbackOrchestrator",
    "feedback_orchestrator",
    "FeedbackAnalytics",
    "summarize_feedback",
    "FeedbackService",
]
