"""
Tone Analyzer

Two independent signals feed one INFLAMMATORY candidate:
  - inflammatory: personal attacks, aggression, dismissive labels,
    profanity aimed at someone
  - hostile tone: condescension ("obviously you don't ...")

When both fire the candidate escalates to
``personal_attack_with_hostile_tone``. All-caps shouting is a
fallback signal, counted only when no phrase pattern matched, so
uppercasing text never changes an existing verdict.
"""

from __future__ import annotations

from typing import Optional

from reasonbridge.aggregator import excerpts, tone_confidence
from reasonbridge.logging import feedback_fields, get_logger
from reasonbridge.models import FeedbackCandidate, FeedbackType, resources_payload
from reasonbridge.patterns import (
    HOSTILE_TONE_GROUP,
    INFLAMMATORY_GROUP,
    SHOUTING_GROUP,
    TONE_RESOURCES,
    is_analyzable,
    scan_group,
)

logger = get_logger("tone")

COMBINED_SUBTYPE = "personal_attack_with_hostile_tone"
COMBINED_SUGGESTION = (
    "This response contains personal attacks and hostile language. Reframe "
    "your points to focus on the topic at hand with respectful language."
)


class ToneAnalyzer:
    """Rule-based detector for inflammatory and hostile language."""

    def analyze(self, text: str) -> Optional[FeedbackCandidate]:
        """Return one INFLAMMATORY candidate, or None for respectful text."""
        if not is_analyzable(text):
            return None

        inflammatory = scan_group(text, INFLAMMATORY_GROUP)
        hostile = scan_group(text, HOSTILE_TONE_GROUP)
        if not inflammatory and not hostile:
            inflammatory = scan_group(text, SHOUTING_GROUP)

        matches = inflammatory + hostile
        if not matches:
            return None

        if inflammatory and hostile:
            subtype, suggestion = COMBINED_SUBTYPE, COMBINED_SUGGESTION
        elif hostile:
            subtype, suggestion = HOSTILE_TONE_GROUP.subtype, HOSTILE_TONE_GROUP.suggestion
        else:
            subtype, suggestion = INFLAMMATORY_GROUP.subtype, INFLAMMATORY_GROUP.suggestion

        candidate = FeedbackCandidate(
            type=FeedbackType.INFLAMMATORY,
            subtype=subtype,
            suggestion_text=suggestion,
            reasoning=(
                f"Detected {len(matches)} instance(s) of potentially inflammatory "
                f"language (e.g., {excerpts(matches)}). While passion is valuable, "
                f"personal attacks or hostile tone can shut down productive dialogue "
                f"and violate community standards."
            ),
            confidence_score=tone_confidence(len(matches)),
            educational_resources=resources_payload(TONE_RESOURCES),
        )
        logger.debug("Tone signal detected", extra=feedback_fields(candidate))
        return candidate


tone_analyzer = ToneAnalyzer()
