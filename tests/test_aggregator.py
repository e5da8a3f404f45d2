"""
Tests for the confidence and priority rules.
"""

import pytest
from reasonbridge.aggregator import (
    DISPLAY_THRESHOLD,
    SENSITIVITY_THRESHOLDS,
    bias_confidence,
    dominant_subtype,
    excerpts,
    fallacy_confidence,
    gate,
    is_blocking,
    rank,
    ready_to_post,
    should_display,
    threshold_for,
    tone_confidence,
    unsourced_confidence,
)
from reasonbridge.models import FeedbackCandidate, FeedbackType, Sensitivity
from reasonbridge.patterns import PatternMatch


def _candidate(type_, confidence, subtype=None):
    return FeedbackCandidate(
        type=type_,
        subtype=subtype,
        suggestion_text="s",
        reasoning="r",
        confidence_score=confidence,
    )


class TestThresholds:
    def test_ordering(self):
        assert threshold_for(Sensitivity.LOW) < threshold_for(Sensitivity.MEDIUM)
        assert threshold_for(Sensitivity.MEDIUM) < threshold_for(Sensitivity.HIGH)

    def test_medium_is_display_floor(self):
        assert SENSITIVITY_THRESHOLDS[Sensitivity.MEDIUM] == DISPLAY_THRESHOLD == 0.80

    def test_accepts_strings_and_none(self):
        assert threshold_for("low") == 0.50
        assert threshold_for("HIGH") == 0.85
        assert threshold_for(None) == 0.80

    def test_invalid_sensitivity(self):
        with pytest.raises(ValueError):
            threshold_for("EXTREME")

    def test_display_gate_inclusive(self):
        assert should_display(_candidate(FeedbackType.BIAS, 0.80))
        assert not should_display(_candidate(FeedbackType.BIAS, 0.79))

    def test_gate_by_sensitivity(self):
        candidates = [
            _candidate(FeedbackType.FALLACY, 0.70),
            _candidate(FeedbackType.INFLAMMATORY, 0.85),
            _candidate(FeedbackType.UNSOURCED, 0.81),
        ]
        assert len(gate(candidates, Sensitivity.LOW)) == 3
        assert len(gate(candidates, Sensitivity.MEDIUM)) == 2
        assert len(gate(candidates, Sensitivity.HIGH)) == 1


class TestConfidenceRules:
    def test_fallacy_steps(self):
        assert fallacy_confidence(1) == 0.70
        assert fallacy_confidence(2) == 0.85
        assert fallacy_confidence(2, 2) == 0.86
        assert fallacy_confidence(3, 1) == 0.87
        assert fallacy_confidence(3, 3) == 0.89
        assert fallacy_confidence(20, 7) == 0.92

    @pytest.mark.parametrize("total", range(2, 12))
    def test_any_multi_match_reaches_display_floor(self, total):
        for distinct in range(1, min(total, 7) + 1):
            assert 0.85 <= fallacy_confidence(total, distinct) <= 0.92

    def test_fallacy_never_below_base(self):
        assert fallacy_confidence(1, 0) == 0.70

    def test_tone_steps(self):
        assert tone_confidence(1) == 0.75
        assert tone_confidence(2) == 0.85
        assert tone_confidence(10) == 0.95

    def test_clarity_caps(self):
        assert unsourced_confidence(10) == 0.88
        assert bias_confidence(10) == 0.85

    @pytest.mark.parametrize("rule,ceiling", [
        (tone_confidence, 0.95),
        (unsourced_confidence, 0.88),
        (bias_confidence, 0.85),
    ])
    def test_monotonic_and_bounded(self, rule, ceiling):
        scores = [rule(n) for n in range(1, 12)]
        assert scores == sorted(scores)
        assert all(0.0 <= s <= ceiling for s in scores)

    def test_fallacy_monotonic(self):
        scores = [fallacy_confidence(n, min(n, 7)) for n in range(1, 12)]
        assert scores == sorted(scores)
        assert all(0.70 <= s <= 0.92 for s in scores)


class TestDominantSubtype:
    ORDER = ["ad_hominem", "strawman", "slippery_slope"]

    def test_highest_count_wins(self):
        matches = [
            PatternMatch("slippery_slope", "a"),
            PatternMatch("slippery_slope", "b"),
            PatternMatch("strawman", "c"),
        ]
        assert dominant_subtype(matches, self.ORDER) == "slippery_slope"

    def test_tie_goes_to_first_declared(self):
        matches = [
            PatternMatch("slippery_slope", "a"),
            PatternMatch("strawman", "b"),
        ]
        assert dominant_subtype(matches, self.ORDER) == "strawman"

    def test_undeclared_subtype(self):
        assert dominant_subtype([PatternMatch("other", "x")], self.ORDER) == "other"

    def test_empty(self):
        assert dominant_subtype([], self.ORDER) is None


class TestExcerpts:
    def test_unique_and_limited(self):
        matches = [PatternMatch("s", t) for t in ("shut up", "shut up", "get lost", "you're dumb")]
        assert excerpts(matches) == '"shut up", "get lost"'


class TestRanking:
    def test_confidence_descending(self):
        ranked = rank([
            _candidate(FeedbackType.BIAS, 0.81),
            _candidate(FeedbackType.UNSOURCED, 0.88),
        ])
        assert [c.confidence_score for c in ranked] == [0.88, 0.81]

    def test_type_priority_on_ties(self):
        ranked = rank([
            _candidate(FeedbackType.BIAS, 0.85),
            _candidate(FeedbackType.UNSOURCED, 0.85),
            _candidate(FeedbackType.INFLAMMATORY, 0.85),
            _candidate(FeedbackType.FALLACY, 0.85),
        ])
        assert [c.type for c in ranked] == [
            FeedbackType.FALLACY,
            FeedbackType.INFLAMMATORY,
            FeedbackType.UNSOURCED,
            FeedbackType.BIAS,
        ]

    def test_limit(self):
        candidates = [_candidate(FeedbackType.BIAS, 0.8 + i / 100) for i in range(4)]
        assert len(rank(candidates, limit=2)) == 2


class TestReadiness:
    @pytest.mark.parametrize("type_,subtype,blocking", [
        (FeedbackType.FALLACY, "strawman", True),
        (FeedbackType.INFLAMMATORY, "personal_attack", True),
        (FeedbackType.INFLAMMATORY, "hostile_tone", True),
        (FeedbackType.INFLAMMATORY, "personal_attack_with_hostile_tone", True),
        (FeedbackType.INFLAMMATORY, "sarcasm", False),
        (FeedbackType.UNSOURCED, "unsourced_claim", False),
        (FeedbackType.BIAS, "loaded_language", False),
        (FeedbackType.AFFIRMATION, None, False),
    ])
    def test_is_blocking(self, type_, subtype, blocking):
        assert is_blocking(_candidate(type_, 0.9, subtype)) is blocking

    def test_ready_to_post(self):
        assert ready_to_post([_candidate(FeedbackType.BIAS, 0.85, "loaded_language")])
        assert not ready_to_post([_candidate(FeedbackType.FALLACY, 0.9, "strawman")])
        assert ready_to_post([])
