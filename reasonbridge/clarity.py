"""
Clarity Analyzer

Detects unsourced factual claims (including vague attributions like
"some people say") and loaded, one-sided framing. Unsourced claims
take priority: a text with both yields an UNSOURCED candidate.

Also exposes specificity_score(), the vague-language signal that
feeds ClarityMetrics.specificity_score.
"""

from __future__ import annotations

from typing import Optional

from reasonbridge.aggregator import (
    bias_confidence,
    clamp_confidence,
    excerpts,
    unsourced_confidence,
)
from reasonbridge.models import FeedbackCandidate, FeedbackType, resources_payload
from reasonbridge.patterns import (
    BIAS_GROUP,
    UNSOURCED_GROUP,
    VAGUE_LANGUAGE_GROUP,
    is_analyzable,
    scan_group,
)
from reasonbridge.scorer import SPECIFICITY_BASELINE

VAGUE_PHRASE_PENALTY = 0.15


class ClarityAnalyzer:
    """Rule-based detector for sourcing and neutrality problems."""

    def analyze(self, text: str) -> Optional[FeedbackCandidate]:
        if not is_analyzable(text):
            return None

        unsourced = scan_group(text, UNSOURCED_GROUP) + scan_group(text, VAGUE_LANGUAGE_GROUP)
        if unsourced:
            return FeedbackCandidate(
                type=FeedbackType.UNSOURCED,
                subtype=UNSOURCED_GROUP.subtype,
                suggestion_text=UNSOURCED_GROUP.suggestion,
                reasoning=(
                    f"Detected {len(unsourced)} instance(s) of potentially unsourced "
                    f"claims (e.g., {excerpts(unsourced)}). While these may be based on "
                    f"real research, providing specific sources helps others verify "
                    f"and engage with your evidence more effectively."
                ),
                confidence_score=unsourced_confidence(len(unsourced)),
                educational_resources=resources_payload(UNSOURCED_GROUP.resources),
            )

        biased = scan_group(text, BIAS_GROUP)
        if biased:
            return FeedbackCandidate(
                type=FeedbackType.BIAS,
                subtype=BIAS_GROUP.subtype,
                suggestion_text=BIAS_GROUP.suggestion,
                reasoning=(
                    f"Detected {len(biased)} instance(s) of potentially biased framing "
                    f"(e.g., {excerpts(biased)}). Using loaded language or one-sided "
                    f"framing may make your argument less persuasive to those who "
                    f"don't already agree with you."
                ),
                confidence_score=bias_confidence(len(biased)),
                educational_resources=resources_payload(BIAS_GROUP.resources),
            )

        return None

    def specificity_score(self, text: str) -> float:
        """Baseline 0.85, minus 0.15 per vague attribution, floored at 0."""
        if not is_analyzable(text):
            return SPECIFICITY_BASELINE
        hits = len(scan_group(text, VAGUE_LANGUAGE_GROUP))
        return clamp_confidence(SPECIFICITY_BASELINE - VAGUE_PHRASE_PENALTY * hits)


clarity_analyzer = ClarityAnalyzer()
