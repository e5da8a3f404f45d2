"""
Fallacy Detector

Scans text against the seven fallacy pattern groups and collapses
all hits into a single candidate named after the dominant subtype.
Stateless: analyze() is a pure function of its input.
"""

from __future__ import annotations

from typing import Optional

from reasonbridge.aggregator import dominant_subtype, excerpts, fallacy_confidence
from reasonbridge.models import FeedbackCandidate, FeedbackType, resources_payload
from reasonbridge.patterns import (
    FALLACY_FALLBACK_RESOURCES,
    FALLACY_FALLBACK_SUGGESTION,
    FALLACY_GROUPS,
    PatternGroup,
    is_analyzable,
    scan_groups,
)


class FallacyDetector:
    """Rule-based detector for common logical fallacies."""

    def __init__(self, groups: Optional[list[PatternGroup]] = None):
        self._groups = list(groups) if groups is not None else list(FALLACY_GROUPS)
        self._by_subtype = {g.subtype: g for g in self._groups}

    @property
    def subtypes(self) -> list[str]:
        return [g.subtype for g in self._groups]

    def analyze(self, text: str) -> Optional[FeedbackCandidate]:
        """Return one FALLACY candidate, or None when nothing matched."""
        if not is_analyzable(text):
            return None

        matches = scan_groups(text, self._groups)
        if not matches:
            return None

        dominant = dominant_subtype(matches, self.subtypes)
        group = self._by_subtype[dominant]
        distinct = len({m.subtype for m in matches})

        return FeedbackCandidate(
            type=FeedbackType.FALLACY,
            subtype=dominant,
            suggestion_text=group.suggestion or FALLACY_FALLBACK_SUGGESTION,
            reasoning=(
                f"Detected {len(matches)} instance(s) of {group.label} "
                f"(e.g., {excerpts(matches)}). Logical fallacies can weaken your "
                f"argument even when your underlying point may be valid. Consider "
                f"restructuring your reasoning to strengthen your position."
            ),
            confidence_score=fallacy_confidence(len(matches), distinct),
            educational_resources=resources_payload(
                group.resources or FALLACY_FALLBACK_RESOURCES
            ),
        )


fallacy_detector = FallacyDetector()
