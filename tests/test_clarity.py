"""
Tests for the ClarityAnalyzer and clarity metrics.
"""

import pytest
from reasonbridge.clarity import clarity_analyzer
from reasonbridge.models import Feedback, FeedbackType
from reasonbridge.scorer import (
    NO_ISSUES_SUMMARY,
    SPECIFICITY_BASELINE,
    calculate_clarity_metrics,
    clarity_label,
)


def _feedback(type_, confidence=0.85, displayed=True, idx=0):
    return Feedback(
        id=f"fb-{idx}",
        response_id="resp-1",
        type=type_,
        subtype=None,
        suggestion_text="s",
        reasoning="r",
        confidence_score=confidence,
        displayed_to_user=displayed,
        created_at="2026-01-01T00:00:00+00:00",
    )


# ============================================================
# ANALYZER
# ============================================================

class TestUnsourcedClaims:
    @pytest.mark.parametrize("text", [
        "Studies show that remote work boosts productivity.",
        "Research proves the policy failed.",
        "Scientists say the effect is real.",
        "It's a fact that prices went up.",
        "Over 70% of people support the measure.",
        "According to experts the bridge is unsafe.",
        "The data shows a clear upward trend.",
        "Some people say the mayor is resigning.",
        "I heard that the budget was cut.",
    ])
    def test_detected(self, text):
        result = clarity_analyzer.analyze(text)
        assert result is not None
        assert result.type == FeedbackType.UNSOURCED
        assert result.subtype == "unsourced_claim"
        assert "unsourced claims" in result.reasoning

    def test_confidence_grows_and_caps(self):
        one = clarity_analyzer.analyze("The data shows a clear upward trend.")
        two = clarity_analyzer.analyze(
            "The data shows a clear upward trend and research proves it."
        )
        many = clarity_analyzer.analyze(
            "The data shows it. Research proves it. Scientists say so. "
            "I heard that 70% of people agree, according to experts."
        )
        assert one.confidence_score == 0.73
        assert two.confidence_score == 0.81
        assert many.confidence_score == 0.88

    def test_unsourced_beats_bias(self):
        result = clarity_analyzer.analyze(
            "Research shows that any reasonable person would agree."
        )
        assert result.type == FeedbackType.UNSOURCED

    def test_citation_resources(self):
        result = clarity_analyzer.analyze("Research proves the policy failed.")
        titles = [link["title"] for link in result.educational_resources["links"]]
        assert titles == ["How to Cite Sources", "Evaluating Information Sources"]


class TestBias:
    @pytest.mark.parametrize("text", [
        "Any reasonable person would reject this proposal.",
        "It's common sense that taxes should be lower.",
        "Only fools would believe such a claim.",
        "Of course management is to blame here.",
        "These radical activists want to tear everything down.",
    ])
    def test_loaded_language(self, text):
        result = clarity_analyzer.analyze(text)
        assert result is not None
        assert result.type == FeedbackType.BIAS
        assert result.subtype == "loaded_language"

    def test_confidence(self):
        result = clarity_analyzer.analyze("Any reasonable person would reject this proposal.")
        assert result.confidence_score == 0.68

    def test_bias_capped(self):
        result = clarity_analyzer.analyze(
            "Any reasonable person knows it. It's common sense that radical ideas "
            "fail. Of course critics are wrong, and only cranks would believe otherwise."
        )
        assert result.confidence_score == 0.85


class TestCleanAndEmpty:
    @pytest.mark.parametrize("text", [
        "I disagree with your perspective; the evidence suggests otherwise.",
        "The 2024 census (Table B-1) reports a 12% increase in urban population.",
        "",
        "  \n ",
    ])
    def test_returns_none(self, text):
        assert clarity_analyzer.analyze(text) is None


class TestSpecificityScore:
    def test_baseline_without_vague_language(self):
        assert clarity_analyzer.specificity_score("The report cites three audits.") == 0.85

    def test_vague_phrases_lower_score(self):
        assert clarity_analyzer.specificity_score("Some people say it works.") == 0.7
        assert clarity_analyzer.specificity_score(
            "Some people say it works. I heard that it failed. Rumor has it the "
            "board knew. Word on the street is they say that it is over."
        ) == 0.10

    def test_empty_text_baseline(self):
        assert clarity_analyzer.specificity_score("") == SPECIFICITY_BASELINE


# ============================================================
# METRICS
# ============================================================

class TestProperties:
    @pytest.mark.parametrize("text", [
        "Studies show that remote work boosts output, and the data shows it.",
        "Some people say the plan failed. I heard that too.",
        "Any reasonable person would see this is a radical proposal.",
        "It's common sense that lower taxes help growth.",
    ])
    def test_case_insensitive(self, text):
        base = clarity_analyzer.analyze(text)
        assert base is not None
        for variant in (text.upper(), text.title()):
            other = clarity_analyzer.analyze(variant)
            assert (other.type, other.subtype, other.confidence_score) == (
                base.type, base.subtype, base.confidence_score,
            )

    def test_specificity_case_insensitive(self):
        text = "Some people say the plan failed. I heard that too."
        expected = clarity_analyzer.specificity_score(text)
        assert clarity_analyzer.specificity_score(text.upper()) == expected
        assert clarity_analyzer.specificity_score(text.title()) == expected

    def test_deterministic(self):
        text = "Research shows crime is up, and any reasonable person knows why."
        assert clarity_analyzer.analyze(text) == clarity_analyzer.analyze(text)
        assert clarity_analyzer.specificity_score(text) == \
            clarity_analyzer.specificity_score(text)


class TestClarityMetrics:
    def test_two_unsourced_one_bias(self):
        feedback = [
            _feedback(FeedbackType.UNSOURCED, idx=1),
            _feedback(FeedbackType.UNSOURCED, idx=2),
            _feedback(FeedbackType.BIAS, idx=3),
        ]
        metrics = calculate_clarity_metrics(feedback)
        assert metrics.sourcing_score == 0.6
        assert metrics.neutrality_score == 0.85
        assert metrics.specificity_score == 0.85
        assert metrics.overall_clarity_score == pytest.approx((0.6 + 0.85 + 0.85) / 3, abs=1e-4)
        assert metrics.issues_detected == {"unsourced": 2, "bias": 1, "total": 3}
        assert metrics.label == "Fair"
        assert metrics.has_issues is True

    def test_low_confidence_is_ignored(self):
        metrics = calculate_clarity_metrics([_feedback(FeedbackType.UNSOURCED, confidence=0.79)])
        assert metrics.issues_detected["total"] == 0
        assert metrics.sourcing_score == 1.0

    def test_hidden_feedback_is_ignored(self):
        metrics = calculate_clarity_metrics([_feedback(FeedbackType.BIAS, displayed=False)])
        assert metrics.neutrality_score == 1.0

    def test_other_types_are_ignored(self):
        metrics = calculate_clarity_metrics([
            _feedback(FeedbackType.FALLACY, confidence=0.9),
            _feedback(FeedbackType.INFLAMMATORY, confidence=0.95),
        ])
        assert metrics.has_issues is False

    def test_scores_floor_at_zero(self):
        metrics = calculate_clarity_metrics(
            [_feedback(FeedbackType.UNSOURCED, idx=i) for i in range(8)]
        )
        assert metrics.sourcing_score == 0.0

    def test_empty_is_no_issues_state(self):
        metrics = calculate_clarity_metrics([])
        assert metrics.has_issues is False
        assert metrics.summary == NO_ISSUES_SUMMARY
        assert metrics.sourcing_score == 1.0
        assert metrics.neutrality_score == 1.0

    def test_supplied_metrics_override(self):
        metrics = calculate_clarity_metrics(
            [_feedback(FeedbackType.UNSOURCED)],
            metrics={"sourcing_score": 0.5, "specificity_score": 0.4},
        )
        assert metrics.sourcing_score == 0.5
        assert metrics.specificity_score == 0.4
        assert metrics.neutrality_score == 1.0

    def test_specificity_hook_accepts_callable(self):
        metrics = calculate_clarity_metrics([], specificity=lambda: 0.55)
        assert metrics.specificity_score == 0.55

    def test_recomputed_when_feedback_changes(self):
        feedback = [_feedback(FeedbackType.UNSOURCED, idx=1)]
        before = calculate_clarity_metrics(feedback)
        feedback.append(_feedback(FeedbackType.UNSOURCED, idx=2))
        after = calculate_clarity_metrics(feedback)
        assert after.sourcing_score < before.sourcing_score


class TestClarityLabel:
    @pytest.mark.parametrize("score,label", [
        (1.0, "Excellent"),
        (0.90, "Excellent"),
        (0.8999, "Good"),
        (0.80, "Good"),
        (0.70, "Fair"),
        (0.60, "Needs Improvement"),
        (0.5999, "Poor"),
        (0.0, "Poor"),
    ])
    def test_bands(self, score, label):
        assert clarity_label(score) == label
