"""
Confidence & Priority Aggregator

Shared scoring rules for every detector and every caller:

  - DISPLAY_THRESHOLD (0.80) is the one confidence floor. Persisted
    ``displayed_to_user``, the clarity-metric filter, and the MEDIUM
    sensitivity gate all read it from here.
  - Per-type confidence rules (base, step, ceiling).
  - Dominant-subtype resolution with declaration-order tie-breaks.
  - Ranking by confidence, then by type severity.
  - The readiness verdict (which candidates block posting).

These constants are contractual. Other components and the test
suite depend on the exact values.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Union

from reasonbridge.models import FeedbackCandidate, FeedbackType, Sensitivity
from reasonbridge.patterns import PatternMatch


# ============================================================
# THRESHOLDS
# ============================================================

DISPLAY_THRESHOLD = 0.80

SENSITIVITY_THRESHOLDS: dict[Sensitivity, float] = {
    Sensitivity.LOW: 0.50,
    Sensitivity.MEDIUM: DISPLAY_THRESHOLD,
    Sensitivity.HIGH: 0.85,
}


def coerce_sensitivity(sensitivity: Union[Sensitivity, str, None]) -> Sensitivity:
    """Accept an enum, its name in any case, or None (MEDIUM)."""
    if sensitivity is None:
        return Sensitivity.MEDIUM
    if isinstance(sensitivity, Sensitivity):
        return sensitivity
    return Sensitivity(str(sensitivity).upper())


def threshold_for(sensitivity: Union[Sensitivity, str, None]) -> float:
    return SENSITIVITY_THRESHOLDS[coerce_sensitivity(sensitivity)]


def should_display(candidate: FeedbackCandidate) -> bool:
    """The global display gate, independent of request sensitivity."""
    return candidate.confidence_score >= DISPLAY_THRESHOLD


def meets_threshold(
    candidate: FeedbackCandidate,
    sensitivity: Union[Sensitivity, str, None] = Sensitivity.MEDIUM,
) -> bool:
    return candidate.confidence_score >= threshold_for(sensitivity)


def gate(
    candidates: Iterable[FeedbackCandidate],
    sensitivity: Union[Sensitivity, str, None] = Sensitivity.MEDIUM,
) -> list[FeedbackCandidate]:
    """Drop candidates below the sensitivity threshold."""
    floor = threshold_for(sensitivity)
    return [c for c in candidates if c.confidence_score >= floor]


# ============================================================
# CONFIDENCE RULES
# ============================================================

FALLACY_BASE, FALLACY_CEILING = 0.70, 0.92
FALLACY_MULTI_BASE, FALLACY_STEP, FALLACY_SPREAD_STEP = 0.85, 0.02, 0.01
TONE_BASE, TONE_STEP, TONE_CEILING = 0.65, 0.10, 0.95
UNSOURCED_BASE, UNSOURCED_STEP, UNSOURCED_CEILING = 0.65, 0.08, 0.88
BIAS_BASE, BIAS_STEP, BIAS_CEILING = 0.60, 0.08, 0.85
AFFIRMATION_CONFIDENCE = 0.85


def clamp_confidence(value: float, floor: float = 0.0, ceiling: float = 1.0) -> float:
    """Clamp into [floor, ceiling] and round away float noise."""
    return round(min(ceiling, max(floor, value)), 4)


def fallacy_confidence(total_matches: int, distinct_subtypes: int = 1) -> float:
    """
    0.70 for a single match. Two or more matches start at 0.85, then
    +0.02 per further match and +0.01 per additional distinct subtype.
    Clamped to [0.70, 0.92].
    """
    if total_matches <= 0:
        return 0.0
    if total_matches == 1:
        return FALLACY_BASE
    value = (
        FALLACY_MULTI_BASE
        + FALLACY_STEP * (total_matches - 2)
        + FALLACY_SPREAD_STEP * (max(distinct_subtypes, 1) - 1)
    )
    return clamp_confidence(value, FALLACY_BASE, FALLACY_CEILING)


def tone_confidence(matches: int) -> float:
    """0.65 + 0.10 per match, capped at 0.95. One match is 0.75."""
    if matches <= 0:
        return 0.0
    return clamp_confidence(TONE_BASE + TONE_STEP * matches, ceiling=TONE_CEILING)


def unsourced_confidence(matches: int) -> float:
    if matches <= 0:
        return 0.0
    return clamp_confidence(
        UNSOURCED_BASE + UNSOURCED_STEP * matches, ceiling=UNSOURCED_CEILING,
    )


def bias_confidence(matches: int) -> float:
    if matches <= 0:
        return 0.0
    return clamp_confidence(BIAS_BASE + BIAS_STEP * matches, ceiling=BIAS_CEILING)


# ============================================================
# SUBTYPE RESOLUTION
# ============================================================

def dominant_subtype(
    matches: list[PatternMatch], order: list[str],
) -> Optional[str]:
    """
    The most frequently matched subtype.

    Ties go to whichever subtype appears first in ``order`` (the
    group declaration order). Subtypes missing from ``order`` rank
    after every declared one.
    """
    if not matches:
        return None
    counts = Counter(m.subtype for m in matches)
    ranked = list(order) + [s for s in counts if s not in order]
    best = None
    for subtype in ranked:
        if counts[subtype] > counts.get(best, 0):
            best = subtype
    return best


def excerpts(matches: list[PatternMatch], limit: int = 2) -> str:
    """Up to ``limit`` unique matched phrases, quoted and comma-joined."""
    seen: list[str] = []
    for m in matches:
        if m.text not in seen:
            seen.append(m.text)
        if len(seen) >= limit:
            break
    return ", ".join(f'"{t}"' for t in seen)


# ============================================================
# RANKING & READINESS
# ============================================================

TYPE_PRIORITY: dict[FeedbackType, int] = {
    FeedbackType.FALLACY: 0,
    FeedbackType.INFLAMMATORY: 1,
    FeedbackType.UNSOURCED: 2,
    FeedbackType.BIAS: 3,
    FeedbackType.AFFIRMATION: 4,
}

BLOCKING_TONE_MARKERS = ("personal_attack", "hostile_tone")


def rank(
    candidates: Iterable[FeedbackCandidate], limit: Optional[int] = None,
) -> list[FeedbackCandidate]:
    """Sort by confidence (desc), then type severity. Optionally truncate."""
    ordered = sorted(
        candidates,
        key=lambda c: (-c.confidence_score, TYPE_PRIORITY.get(c.type, 99)),
    )
    return ordered[:limit] if limit is not None else ordered


def is_blocking(candidate: FeedbackCandidate) -> bool:
    """FALLACY, or INFLAMMATORY naming a personal attack or hostile tone."""
    if candidate.type == FeedbackType.FALLACY:
        return True
    if candidate.type == FeedbackType.INFLAMMATORY:
        subtype = candidate.subtype or ""
        return any(marker in subtype for marker in BLOCKING_TONE_MARKERS)
    return False


def ready_to_post(candidates: Iterable[FeedbackCandidate]) -> bool:
    return not any(is_blocking(c) for c in candidates)
