"""
API Schemas — Request and Response Models

Pydantic models for the ReasonBridge feedback API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from reasonbridge.config import settings
from reasonbridge.models import FeedbackType, HelpfulRating, Sensitivity


# ============================================================
# SHARED
# ============================================================

class ResourceLinkModel(BaseModel):
    title: str
    url: str


class EducationalResources(BaseModel):
    links: list[ResourceLinkModel] = []


# ============================================================
# RESPONSES
# ============================================================

class CreateResponseRequest(BaseModel):
    """POST /responses request body."""
    content: str = Field(..., min_length=1, max_length=10_000,
                         description="The response text as posted.")


class ResponseRecord(BaseModel):
    id: str
    content: str
    created_at: str


# ============================================================
# FEEDBACK
# ============================================================

class RequestFeedbackRequest(BaseModel):
    """POST /feedback request body."""
    response_id: str = Field(..., min_length=1)
    content: Optional[str] = Field(
        None, min_length=1, max_length=10_000,
        description="Draft to analyze. Defaults to the stored response text.",
    )
    sensitivity: Sensitivity = Sensitivity.MEDIUM

    model_config = {"json_schema_extra": {"examples": [
        {"response_id": "3f1c...", "sensitivity": "MEDIUM"},
    ]}}


class FeedbackResponse(BaseModel):
    """A persisted feedback row."""
    id: str
    response_id: str
    type: FeedbackType
    subtype: Optional[str] = None
    suggestion_text: str
    reasoning: str
    confidence_score: float
    educational_resources: Optional[EducationalResources] = None
    displayed_to_user: bool
    user_acknowledged: bool
    user_revised: bool
    user_helpful_rating: Optional[HelpfulRating] = None
    dismissed_at: Optional[str] = None
    dismissal_reason: Optional[str] = None
    created_at: str


class DismissFeedbackRequest(BaseModel):
    """PATCH /feedback/{id}/dismiss request body."""
    dismissal_reason: Optional[str] = Field(None, max_length=500)


class RateFeedbackRequest(BaseModel):
    """PATCH /feedback/{id}/rating request body."""
    rating: HelpfulRating


# ============================================================
# PREVIEW
# ============================================================

class PreviewFeedbackRequest(BaseModel):
    """POST /feedback/preview request body."""
    content: str = Field(
        ..., min_length=settings.PREVIEW_MIN_LENGTH, max_length=settings.PREVIEW_MAX_LENGTH,
        description="Draft response text (20-10,000 characters by default).",
    )
    sensitivity: Sensitivity = Sensitivity.MEDIUM

    model_config = {"json_schema_extra": {"examples": [
        {"content": "By that logic, everyone knows that this will lead to disaster.",
         "sensitivity": "MEDIUM"},
    ]}}


class PreviewFeedbackItem(BaseModel):
    type: FeedbackType
    subtype: Optional[str] = None
    suggestion_text: str
    reasoning: str
    confidence_score: float
    educational_resources: Optional[EducationalResources] = None
    should_display: bool


class PreviewFeedbackResponse(BaseModel):
    feedback: list[PreviewFeedbackItem]
    ready_to_post: bool
    summary: str
    analysis_time_ms: float
    sensitivity: Sensitivity
    issue_count: int
    cached: bool = False


# ============================================================
# CLARITY & ANALYTICS
# ============================================================

class IssueCounts(BaseModel):
    unsourced: int
    bias: int
    total: int


class ClarityMetricsResponse(BaseModel):
    sourcing_score: float
    neutrality_score: float
    specificity_score: float
    overall_clarity_score: float
    issues_detected: IssueCounts
    label: str
    summary: str
    has_issues: bool


class TypeBreakdownModel(BaseModel):
    count: int
    acknowledged_count: int
    revision_count: int
    dismissed_count: int
    average_confidence: float


class DismissalReasonCount(BaseModel):
    reason: str
    count: int


class FeedbackAnalyticsResponse(BaseModel):
    total_feedback: int
    acknowledged_count: int
    acknowledgment_rate: float
    revision_count: int
    revision_rate: float
    dismissed_count: int
    dismissal_rate: float
    helpful_ratings: dict[str, int]
    average_helpful_score: float
    by_type: dict[str, TypeBreakdownModel]
    top_dismissal_reasons: list[DismissalReasonCount]
    date_range: dict[str, Optional[str]]


# ============================================================
# META
# ============================================================

class PatternInfo(BaseModel):
    category: str
    subtype: str
    label: str
    pattern_count: int
    case_sensitive: bool


class PatternsResponse(BaseModel):
    category: str
    total_groups: int
    total_patterns: int
    patterns: list[PatternInfo]


class HealthResponse(BaseModel):
    status: str
    version: str
    feedback_entries: int
    response_entries: int
    auth_enabled: bool
    preview_cache: dict
