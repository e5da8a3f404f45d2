"""
Feedback Data Model

Enums and dataclasses shared by the detectors, the orchestrator,
the store, and the API layer.

  FeedbackCandidate     — ephemeral detector output
  Feedback              — persisted row (candidate + lifecycle fields)
  ClarityMetrics        — derived sourcing/neutrality/specificity scores
  PreviewFeedbackResult — the live preview payload
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


# ============================================================
# ENUMS
# ============================================================

class FeedbackType(str, Enum):
    FALLACY = "FALLACY"
    INFLAMMATORY = "INFLAMMATORY"
    UNSOURCED = "UNSOURCED"
    BIAS = "BIAS"
    AFFIRMATION = "AFFIRMATION"


class Sensitivity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class HelpfulRating(str, Enum):
    HELPFUL = "HELPFUL"
    NOT_HELPFUL = "NOT_HELPFUL"


# ============================================================
# DETECTOR OUTPUT
# ============================================================

@dataclass(frozen=True)
class ResourceLink:
    """An educational link attached to a feedback item."""
    title: str
    url: str


def resources_payload(links: tuple[ResourceLink, ...] | list[ResourceLink]) -> dict:
    """Shape a list of links as the ``{"links": [...]}`` resource payload."""
    return {"links": [{"title": link.title, "url": link.url} for link in links]}


@dataclass
class FeedbackCandidate:
    """A single detector result, not yet persisted."""
    type: FeedbackType
    suggestion_text: str
    reasoning: str
    confidence_score: float                     # 0.0 to 1.0, capped per type
    subtype: Optional[str] = None               # None only for AFFIRMATION
    educational_resources: Optional[dict] = None  # {"links": [{title, url}]}

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "subtype": self.subtype,
            "suggestion_text": self.suggestion_text,
            "reasoning": self.reasoning,
            "confidence_score": self.confidence_score,
            "educational_resources": self.educational_resources,
        }


# ============================================================
# PERSISTED FEEDBACK
# ============================================================

@dataclass
class Feedback:
    """
    A persisted feedback row.

    ``confidence_score`` and ``displayed_to_user`` are fixed at creation.
    User actions only touch the acknowledgement, revision, rating and
    dismissal fields.
    """
    id: str
    response_id: str
    type: FeedbackType
    suggestion_text: str
    reasoning: str
    confidence_score: float
    displayed_to_user: bool
    created_at: str
    subtype: Optional[str] = None
    educational_resources: Optional[dict] = None
    user_acknowledged: bool = False
    user_revised: bool = False
    user_helpful_rating: Optional[HelpfulRating] = None
    dismissed_at: Optional[str] = None
    dismissal_reason: Optional[str] = None

    @property
    def dismissed(self) -> bool:
        return self.dismissed_at is not None

    @classmethod
    def from_row(cls, row: Any) -> "Feedback":
        """Build from a sqlite3.Row of the feedback table."""
        resources = row["educational_resources"]
        rating = row["user_helpful_rating"]
        return cls(
            id=row["id"],
            response_id=row["response_id"],
            type=FeedbackType(row["type"]),
            subtype=row["subtype"],
            suggestion_text=row["suggestion_text"],
            reasoning=row["reasoning"],
            confidence_score=row["confidence_score"],
            educational_resources=json.loads(resources) if resources else None,
            displayed_to_user=bool(row["displayed_to_user"]),
            user_acknowledged=bool(row["user_acknowledged"]),
            user_revised=bool(row["user_revised"]),
            user_helpful_rating=HelpfulRating(rating) if rating else None,
            dismissed_at=row["dismissed_at"],
            dismissal_reason=row["dismissal_reason"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        data["user_helpful_rating"] = (
            self.user_helpful_rating.value if self.user_helpful_rating else None
        )
        return data


# ============================================================
# DERIVED RESULTS
# ============================================================

@dataclass
class ClarityMetrics:
    """Composite clarity measure. Derived on demand, never stored."""
    sourcing_score: float
    neutrality_score: float
    specificity_score: float
    overall_clarity_score: float
    issues_detected: dict[str, int]   # {"unsourced", "bias", "total"}
    label: str
    summary: str
    has_issues: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PreviewFeedbackResult:
    """Output of a live preview. No identity, no persistence."""
    feedback: list[FeedbackCandidate]
    ready_to_post: bool
    summary: str
    analysis_time_ms: float
    sensitivity: Sensitivity = Sensitivity.MEDIUM
    issue_count: int = field(default=0)

    def to_dict(self) -> dict:
        return {
            "feedback": [c.to_dict() for c in self.feedback],
            "ready_to_post": self.ready_to_post,
            "summary": self.summary,
            "analysis_time_ms": self.analysis_time_ms,
            "sensitivity": self.sensitivity.value,
            "issue_count": self.issue_count,
        }
