"""
Feedback Analytics — Rollup over Persisted Rows

Groups stored feedback rows and reports how users responded:
acknowledgment, revision and dismissal rates (percentages),
helpful-rating counts, a per-type breakdown, and the most common
dismissal reasons.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Iterable, Optional

from reasonbridge.models import Feedback, HelpfulRating

TOP_DISMISSAL_REASONS = 5


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


@dataclass
class TypeBreakdown:
    count: int = 0
    acknowledged_count: int = 0
    revision_count: int = 0
    dismissed_count: int = 0
    average_confidence: float = 0.0


@dataclass
class FeedbackAnalytics:
    total_feedback: int
    acknowledged_count: int
    acknowledgment_rate: float
    revision_count: int
    revision_rate: float
    dismissed_count: int
    dismissal_rate: float
    helpful_ratings: dict[str, int]
    average_helpful_score: float
    by_type: dict[str, TypeBreakdown]
    top_dismissal_reasons: list[dict]
    date_range: dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_feedback(
    rows: Iterable[Feedback],
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> FeedbackAnalytics:
    """Aggregate feedback rows. Rows are assumed already filtered."""
    rows = list(rows)
    total = len(rows)

    acknowledged = sum(1 for f in rows if f.user_acknowledged)
    revised = sum(1 for f in rows if f.user_revised)
    dismissed = sum(1 for f in rows if f.dismissed)

    ratings = Counter(f.user_helpful_rating for f in rows if f.user_helpful_rating)
    helpful = ratings.get(HelpfulRating.HELPFUL, 0)
    not_helpful = ratings.get(HelpfulRating.NOT_HELPFUL, 0)
    rated = helpful + not_helpful

    by_type: dict[str, TypeBreakdown] = {}
    confidence_sums: Counter = Counter()
    for f in rows:
        bucket = by_type.setdefault(f.type.value, TypeBreakdown())
        bucket.count += 1
        bucket.acknowledged_count += int(f.user_acknowledged)
        bucket.revision_count += int(f.user_revised)
        bucket.dismissed_count += int(f.dismissed)
        confidence_sums[f.type.value] += f.confidence_score
    for type_name, bucket in by_type.items():
        bucket.average_confidence = round(confidence_sums[type_name] / bucket.count, 4)

    reasons = Counter(
        f.dismissal_reason for f in rows if f.dismissed and f.dismissal_reason
    )
    top_reasons = sorted(reasons.items(), key=lambda kv: (-kv[1], kv[0]))
    top_reasons = top_reasons[:TOP_DISMISSAL_REASONS]

    return FeedbackAnalytics(
        total_feedback=total,
        acknowledged_count=acknowledged,
        acknowledgment_rate=_percent(acknowledged, total),
        revision_count=revised,
        revision_rate=_percent(revised, total),
        dismissed_count=dismissed,
        dismissal_rate=_percent(dismissed, total),
        helpful_ratings={
            HelpfulRating.HELPFUL.value: helpful,
            HelpfulRating.NOT_HELPFUL.value: not_helpful,
        },
        average_helpful_score=round(helpful / rated, 4) if rated else 0.0,
        by_type=by_type,
        top_dismissal_reasons=[
            {"reason": reason, "count": count} for reason, count in top_reasons
        ],
        date_range={"start": start, "end": end},
    )
