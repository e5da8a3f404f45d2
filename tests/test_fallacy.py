"""
Tests for the FallacyDetector.

One candidate per call, named after the dominant fallacy group.
"""

import pytest
from reasonbridge.detector import feedback_orchestrator
from reasonbridge.fallacy import FallacyDetector, fallacy_detector
from reasonbridge.models import FeedbackType, Sensitivity
from reasonbridge.patterns import PatternGroup


class TestAdHominem:
    def test_you_are_just_a(self):
        result = fallacy_detector.analyze(
            "You're just a student, what would you know about economics?"
        )
        assert result is not None
        assert result.type == FeedbackType.FALLACY
        assert result.subtype == "ad_hominem"
        assert result.confidence_score >= 0.7

    def test_coming_from_someone(self):
        result = fallacy_detector.analyze(
            "That's rich coming from someone who failed the class."
        )
        assert result.subtype == "ad_hominem"

    def test_lack_credentials(self):
        result = fallacy_detector.analyze("You lack credentials to make that argument.")
        assert result.subtype == "ad_hominem"

    def test_what_would_you_know(self):
        result = fallacy_detector.analyze("What would you know about running a business?")
        assert result.subtype == "ad_hominem"

    def test_suggestion(self):
        result = fallacy_detector.analyze(
            "You're only an amateur, so your opinion doesn't count."
        )
        assert "rather than attacking the person" in result.suggestion_text


class TestStrawman:
    def test_so_you_are_saying(self):
        result = fallacy_detector.analyze(
            "So you're saying we should just ignore all safety regulations?"
        )
        assert result.subtype == "strawman"

    def test_by_that_logic(self):
        result = fallacy_detector.analyze(
            "By that logic, we should also ban all cars because they can cause accidents."
        )
        assert result.subtype == "strawman"

    def test_follow_your_reasoning(self):
        result = fallacy_detector.analyze(
            "If we follow your reasoning, then we should eliminate all taxes."
        )
        assert result.subtype == "strawman"
        assert "actual argument" in result.suggestion_text
        assert "quote" in result.suggestion_text


class TestOtherFallacies:
    """One representative fixture per remaining group."""

    @pytest.mark.parametrize("text,subtype,keyword", [
        ("We can fund either schools or roads, nothing else.",
         "false_dichotomy", "more than two options"),
        ("There are only two options here and you know it.",
         "false_dichotomy", "middle-ground"),
        ("If we allow this, next thing you know they'll take everything.",
         "slippery_slope", "causal chain"),
        ("Where does it end? First the parks, then the schools.",
         "slippery_slope", "evidence"),
        ("Think of the children! We must ban this immediately.",
         "appeal_to_emotion", "factual reasoning"),
        ("How would you feel if your neighbor lost their job?",
         "appeal_to_emotion", "objective evidence"),
        ("All experts are always wrong about these predictions.",
         "hasty_generalization", "sweeping generalizations"),
        ("Nobody thinks that plan will survive the vote.",
         "hasty_generalization", "specific examples"),
        ("Experts agree that the policy is sound.",
         "appeal_to_authority", "specific sources"),
        ("Science says we are right, end of story.",
         "appeal_to_authority", "counter-evidence"),
    ])
    def test_group_detected(self, text, subtype, keyword):
        result = fallacy_detector.analyze(text)
        assert result is not None
        assert result.subtype == subtype
        assert keyword in result.suggestion_text


class TestCleanText:
    @pytest.mark.parametrize("text", [
        "Based on the economic data from Q3 2024, inflation has decreased by 2%. "
        "This suggests that the current monetary policy may be effective.",
        "According to the 2024 report by the Congressional Budget Office, the deficit "
        "is projected to reach $1.5 trillion by 2025.",
        "While some argue X is true, others contend Y. The evidence seems to support "
        "a middle ground where both factors contribute to the outcome.",
        "Could you provide more details on how this conclusion was reached? I'd like "
        "to understand the methodology better.",
        "I disagree with your perspective; the evidence suggests otherwise.",
    ])
    def test_returns_none(self, text):
        assert fallacy_detector.analyze(text) is None

    @pytest.mark.parametrize("text", ["", "   \n\t   ", None])
    def test_empty_returns_none(self, text):
        assert fallacy_detector.analyze(text) is None


class TestConfidence:
    def test_single_match_is_base(self):
        result = fallacy_detector.analyze("By that logic, we should quit.")
        assert result.confidence_score == 0.70

    def test_three_groups_reach_display_floor(self):
        result = fallacy_detector.analyze(
            "By that logic, everyone knows that this will lead to disaster."
        )
        assert result.confidence_score >= 0.85
        assert result.subtype == "strawman"

    def test_two_matches_in_one_group(self):
        result = fallacy_detector.analyze(
            "You're just a novice, coming from someone with no experience."
        )
        assert result.subtype == "ad_hominem"
        assert result.confidence_score == 0.85

    def test_two_matches_across_groups_surface_at_medium(self):
        result = fallacy_detector.analyze("By that logic, this will lead to ruin.")
        assert result.confidence_score == 0.86
        preview = feedback_orchestrator.preview(
            "By that logic, this will lead to ruin.", Sensitivity.MEDIUM,
        )
        assert preview.feedback[0].type == FeedbackType.FALLACY
        assert preview.ready_to_post is False

    def test_capped_at_092(self):
        result = fallacy_detector.analyze(
            "By that logic, all experts are always wrong. Studies show everyone "
            "knows that this will lead to chaos. Where does it end?"
        )
        assert result.confidence_score == 0.92

    def test_monotonic_in_matches(self):
        one = fallacy_detector.analyze("You're just a novice.")
        two = fallacy_detector.analyze(
            "You're just a novice, coming from someone with no experience."
        )
        three = fallacy_detector.analyze(
            "You're just a novice, coming from someone with no experience. "
            "What would you know?"
        )
        assert one.confidence_score <= two.confidence_score <= three.confidence_score
        assert three.confidence_score <= 0.92

    def test_most_common_group_wins(self):
        result = fallacy_detector.analyze(
            "You're just a novice, coming from someone with no experience. "
            "By that logic nothing matters."
        )
        assert result.subtype == "ad_hominem"


class TestReasoningAndResources:
    def test_reasoning_names_label_and_count(self):
        result = fallacy_detector.analyze(
            "You're just a novice, coming from someone with no experience."
        )
        assert "Ad Hominem" in result.reasoning
        assert "2 instance(s)" in result.reasoning

    def test_reasoning_quotes_at_most_two(self):
        result = fallacy_detector.analyze(
            "By that logic, all experts are always wrong. Studies show everyone "
            "knows that this will lead to chaos."
        )
        quoted = result.reasoning.split('"')[1::2]
        assert 1 <= len(quoted) <= 2

    def test_two_links_per_known_subtype(self):
        result = fallacy_detector.analyze("Experts agree that this is fine.")
        links = result.educational_resources["links"]
        assert len(links) == 2
        assert links[0]["url"].startswith("https://")

    def test_fallback_for_unknown_subtype(self):
        detector = FallacyDetector(groups=[
            PatternGroup(
                subtype="circular_reasoning",
                label="Circular Reasoning",
                patterns=(r"\btrue\s+because\s+it\s+is\s+true\b",),
            ),
        ])
        result = detector.analyze("It is true because it is true.")
        assert result.subtype == "circular_reasoning"
        assert result.suggestion_text == "Consider strengthening your logical reasoning."
        assert len(result.educational_resources["links"]) >= 1


class TestEdgeCases:
    def test_case_insensitive(self):
        variants = [
            "by that logic, we should quit",
            "BY THAT LOGIC, WE SHOULD QUIT",
            "By That Logic, We Should Quit",
        ]
        results = [fallacy_detector.analyze(v) for v in variants]
        assert all(r is not None for r in results)
        assert {(r.subtype, r.confidence_score) for r in results} == {("strawman", 0.70)}

    def test_deterministic(self):
        text = "By that logic, everyone knows that this will lead to disaster."
        assert fallacy_detector.analyze(text) == fallacy_detector.analyze(text)

    def test_long_content(self):
        text = "This is a well-reasoned argument. " * 100 + "By that logic, everything fails."
        result = fallacy_detector.analyze(text)
        assert result.subtype == "strawman"

    def test_curly_apostrophe(self):
        result = fallacy_detector.analyze("You’re just a beginner at this.")
        assert result.subtype == "ad_hominem"
