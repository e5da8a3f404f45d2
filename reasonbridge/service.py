"""
Feedback Service — Persistence-Path Operations

The persisted feedback lifecycle:

  created       — by request_feedback(), never by a preview
  acknowledged  — user action, idempotent
  rated         — HELPFUL / NOT_HELPFUL, overwritable
  revised       — user action, idempotent
  dismissed     — soft delete; the row stays for analytics

Detector output (type, subtype, texts, confidence) and the
``displayed_to_user`` flag are fixed at creation. A later change
of sensitivity only affects fresh previews.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from reasonbridge.aggregator import should_display
from reasonbridge.analytics import FeedbackAnalytics, summarize_feedback
from reasonbridge.clarity import clarity_analyzer
from reasonbridge.config import settings
from reasonbridge.detector import FeedbackOrchestrator, feedback_orchestrator
from reasonbridge.exceptions import FeedbackNotFoundError, ResponseNotFoundError
from reasonbridge.logging import feedback_fields, get_logger
from reasonbridge.models import (
    ClarityMetrics,
    Feedback,
    FeedbackCandidate,
    FeedbackType,
    HelpfulRating,
    Sensitivity,
)
from reasonbridge.scorer import calculate_clarity_metrics
from reasonbridge.store import FeedbackStore, feedback_store, new_id, utc_now

logger = get_logger("service")


class FeedbackService:
    """Creates and mutates persisted feedback for stored responses."""

    def __init__(
        self,
        store: Optional[FeedbackStore] = None,
        orchestrator: Optional[FeedbackOrchestrator] = None,
    ):
        self.store = store or feedback_store
        self.orchestrator = orchestrator or feedback_orchestrator

    # ------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------

    def request_feedback(
        self,
        response_id: str,
        content: Optional[str] = None,
        sensitivity: Union[Sensitivity, str, None] = Sensitivity.MEDIUM,
    ) -> list[Feedback]:
        """
        Analyze a stored response and persist the resulting feedback.

        Args:
            response_id: Must reference an existing response.
            content: Text to analyze. Defaults to the stored response text
                (callers pass a revised draft here).
            sensitivity: Threshold used to decide which candidates to store.

        Returns:
            The newly created Feedback rows, one per stored candidate.

        Raises:
            ResponseNotFoundError: unknown response_id.
            AnalysisUnavailableError: a detector failed.
        """
        response = self.store.get_response(response_id)
        if response is None:
            raise ResponseNotFoundError(response_id)

        text = content if content is not None else response["content"]
        candidates = self.orchestrator.candidates_for_request(text, sensitivity)

        created = [self._persist(response_id, c) for c in candidates]
        logger.info(
            f"Feedback requested: {len(created)} item(s) stored",
            extra={"response_id": response_id, "candidates": len(created)},
        )
        return created

    def _persist(self, response_id: str, candidate: FeedbackCandidate) -> Feedback:
        feedback = Feedback(
            id=new_id(),
            response_id=response_id,
            type=candidate.type,
            subtype=candidate.subtype,
            suggestion_text=candidate.suggestion_text,
            reasoning=candidate.reasoning,
            confidence_score=candidate.confidence_score,
            educational_resources=candidate.educational_resources,
            displayed_to_user=should_display(candidate),
            created_at=utc_now(),
        )
        stored = self.store.insert_feedback(feedback)
        logger.debug("Feedback stored", extra=feedback_fields(stored))
        return stored

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    def get_feedback_by_id(self, feedback_id: str) -> Feedback:
        feedback = self.store.get_feedback(feedback_id)
        if feedback is None:
            raise FeedbackNotFoundError(feedback_id)
        return feedback

    def list_feedback_for_response(self, response_id: str) -> list[Feedback]:
        if self.store.get_response(response_id) is None:
            raise ResponseNotFoundError(response_id)
        return self.store.list_feedback(response_id=response_id)

    # ------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------

    def dismiss_feedback(
        self, feedback_id: str, dismissal_reason: Optional[str] = None,
    ) -> Feedback:
        """Soft-delete. Dismissing twice keeps the first timestamp and reason."""
        feedback = self.get_feedback_by_id(feedback_id)
        if feedback.dismissed:
            return feedback
        updated = self.store.update_feedback(
            feedback_id, dismissed_at=utc_now(), dismissal_reason=dismissal_reason,
        )
        logger.info("Feedback dismissed", extra=feedback_fields(updated))
        return updated

    def acknowledge_feedback(self, feedback_id: str) -> Feedback:
        feedback = self.get_feedback_by_id(feedback_id)
        if feedback.user_acknowledged:
            return feedback
        return self.store.update_feedback(feedback_id, user_acknowledged=True)

    def rate_feedback(
        self, feedback_id: str, rating: Union[HelpfulRating, str],
    ) -> Feedback:
        self.get_feedback_by_id(feedback_id)
        return self.store.update_feedback(
            feedback_id, user_helpful_rating=HelpfulRating(rating),
        )

    def mark_revised(self, feedback_id: str) -> Feedback:
        feedback = self.get_feedback_by_id(feedback_id)
        if feedback.user_revised:
            return feedback
        return self.store.update_feedback(feedback_id, user_revised=True)

    # ------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------

    def clarity_for_response(
        self, response_id: str, content: Optional[str] = None,
    ) -> ClarityMetrics:
        """ClarityMetrics over stored rows; specificity from the text when known."""
        response = self.store.get_response(response_id)
        if response is None:
            raise ResponseNotFoundError(response_id)
        text = content if content is not None else response["content"]
        rows = self.store.list_feedback(response_id=response_id)
        return calculate_clarity_metrics(
            rows, specificity=lambda: clarity_analyzer.specificity_score(text),
        )

    def get_analytics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        feedback_type: Optional[Union[FeedbackType, str]] = None,
        response_id: Optional[str] = None,
    ) -> FeedbackAnalytics:
        """Rollup over the date range. Defaults to the last 30 days."""
        end = end or datetime.now(timezone.utc)
        start = start or end - timedelta(days=settings.ANALYTICS_DEFAULT_DAYS)
        start_iso, end_iso = _as_utc(start).isoformat(), _as_utc(end).isoformat()

        rows = self.store.list_feedback(
            response_id=response_id,
            feedback_type=FeedbackType(feedback_type) if feedback_type else None,
            start=start_iso,
            end=end_iso,
        )
        return summarize_feedback(rows, start=start_iso, end=end_iso)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


feedback_service = FeedbackService()
