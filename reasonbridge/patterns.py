"""
Pattern Library — Declarative Detection Tables

Every detector in ReasonBridge is a scan over one or more
PatternGroups. A group carries:
  1. A subtype identifier and a human-readable label
  2. A fixed set of phrase patterns (regex, compiled once)
  3. The coaching suggestion shown when the group dominates
  4. Educational links for that subtype

Adding a subtype means adding a table entry. No detector
control flow changes.

Pattern rules:
  - Phrase patterns are case-insensitive.
  - Each pattern contributes at most one match per scan
    (its first occurrence is the independent signal).
  - No nested quantifiers, so a scan is linear in input length.
  - Curly apostrophes are folded to straight ones before matching.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from reasonbridge.models import ResourceLink


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class PatternGroup:
    """A named set of phrase patterns for one feedback subtype."""
    subtype: str
    label: str
    patterns: tuple[str, ...]
    suggestion: str = ""
    resources: tuple[ResourceLink, ...] = ()
    flags: int = re.IGNORECASE
    compiled: list[re.Pattern] = field(init=False, repr=False)

    def __post_init__(self):
        self.compiled = [re.compile(p, self.flags) for p in self.patterns]


@dataclass(frozen=True)
class PatternMatch:
    """One independent pattern hit."""
    subtype: str
    text: str


_APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


def normalize(text: str) -> str:
    """Fold typographic apostrophes so one pattern covers both forms."""
    return text.translate(_APOSTROPHES)


def is_analyzable(text) -> bool:
    """True when the input carries any non-whitespace content."""
    return isinstance(text, str) and bool(text.strip())


def scan_group(text: str, group: PatternGroup) -> list[PatternMatch]:
    """Scan text against one group. At most one match per pattern."""
    text = normalize(text)
    matches = []
    for regex in group.compiled:
        found = regex.search(text)
        if found:
            matches.append(PatternMatch(group.subtype, found.group(0)))
    return matches


def scan_groups(text: str, groups: list[PatternGroup]) -> list[PatternMatch]:
    """Scan text against several groups, in declaration order."""
    matches = []
    for group in groups:
        matches.extend(scan_group(text, group))
    return matches


def _wiki(title: str, slug: str) -> ResourceLink:
    return ResourceLink(title, f"https://en.wikipedia.org/wiki/{slug}")


def _ylfi(title: str, slug: str) -> ResourceLink:
    return ResourceLink(title, f"https://yourlogicalfallacyis.com/{slug}")


# ============================================================
# FALLACY GROUPS (declaration order breaks dominance ties)
# ============================================================

FALLACY_GROUPS: list[PatternGroup] = [
    PatternGroup(
        subtype="ad_hominem",
        label="Ad Hominem (attacking the person)",
        patterns=(
            r"\byou(?:'re|\s+are)\s+(?:just|only)\s+(?:a|an)\s+\w+",
            r"\bcoming\s+from\s+(?:someone|you)\b",
            r"\b(?:you|your)\s+(?:lack|don't\s+have)\s+(?:credentials|experience|expertise)",
            r"\bwhat\s+would\s+you\s+know\b",
        ),
        suggestion=(
            "Focus on addressing the argument itself rather than attacking the "
            "person making it. What specific claims can you refute?"
        ),
        resources=(
            _wiki("Ad Hominem Fallacy", "Ad_hominem"),
            _ylfi("Arguing Against the Person", "ad-hominem"),
        ),
    ),
    PatternGroup(
        subtype="strawman",
        label="Strawman (misrepresenting the argument)",
        patterns=(
            r"\bso\s+you(?:'re|\s+are)\s+saying\s+(?:that\s+)?we\s+should",
            r"\bby\s+that\s+logic\b",
            r"\bif\s+we\s+follow\s+your\s+reasoning\b",
            r"\byou\s+think\s+that\s+all\s+\w+\s+are\b",
        ),
        suggestion=(
            "Ensure you're responding to the actual argument being made, not a "
            "misrepresented version. Can you quote their exact position?"
        ),
        resources=(
            _wiki("Straw Man Fallacy", "Straw_man"),
            _ylfi("Misrepresenting Arguments", "strawman"),
        ),
    ),
    PatternGroup(
        subtype="false_dichotomy",
        label="False Dichotomy (presenting only two options)",
        patterns=(
            r"\beither\s+\w+\s+or\s+\w+",
            r"\byou(?:'re|\s+are)\s+(?:either|with\s+us\s+or\s+against\s+us)\b",
            r"\bonly\s+two\s+(?:options|choices)\b",
            r"\bif\s+you\s+don't\s+\w+,?\s+then\s+you\s+must\b",
        ),
        suggestion=(
            "Consider whether there are more than two options available. Are "
            "there middle-ground positions or alternative approaches?"
        ),
        resources=(
            _wiki("False Dilemma", "False_dilemma"),
            _ylfi("Black or White Thinking", "black-or-white"),
        ),
    ),
    PatternGroup(
        subtype="slippery_slope",
        label="Slippery Slope (claiming cascading consequences without evidence)",
        patterns=(
            r"\bif\s+we\s+allow\s+\w+,?\s+(?:then\s+)?next\s+thing\b",
            r"\bthis\s+will\s+lead\s+to\b",
            r"\bwhere\s+does\s+it\s+(?:end|stop)\b",
            r"\bit's\s+a\s+slippery\s+slope\b",
        ),
        suggestion=(
            "Provide evidence for each step in the causal chain. What specific "
            "mechanisms would lead to the predicted outcome?"
        ),
        resources=(
            _wiki("Slippery Slope Fallacy", "Slippery_slope"),
            _ylfi("Understanding Slippery Slopes", "slippery-slope"),
        ),
    ),
    PatternGroup(
        subtype="appeal_to_emotion",
        label="Appeal to Emotion (using feelings instead of logic)",
        patterns=(
            r"\bthink\s+of\s+the\s+children\b",
            r"\bhow\s+would\s+you\s+feel\s+if\b",
            r"\bimagine\s+if\s+it\s+was\s+your\b",
            r"\bthis\s+makes\s+me\s+(?:so\s+)?(?:angry|sad|upset)\b",
        ),
        suggestion=(
            "While emotions are valid, consider supporting your point with "
            "factual reasoning. What objective evidence supports this position?"
        ),
        resources=(
            _wiki("Appeal to Emotion", "Appeal_to_emotion"),
            _ylfi("Emotional Reasoning", "appeal-to-emotion"),
        ),
    ),
    PatternGroup(
        subtype="hasty_generalization",
        label="Hasty Generalization (overgeneralizing from limited examples)",
        patterns=(
            r"\ball\s+\w+\s+are\s+(?:always|never)\b",
            r"\bevery(?:one)?\s+knows\s+that\b",
            r"\b(?:no\s+one|nobody)\s+thinks\s+that\b",
            r"\b\w+\s+always\s+(?:does|says|thinks)\b",
        ),
        suggestion=(
            "Avoid sweeping generalizations. Can you provide specific examples "
            "or acknowledge exceptions?"
        ),
        resources=(
            _wiki("Hasty Generalization", "Hasty_generalization"),
            _ylfi("Overgeneralization", "composition-division"),
        ),
    ),
    PatternGroup(
        subtype="appeal_to_authority",
        label="Appeal to Authority (citing sources without specifics)",
        patterns=(
            r"\bexperts\s+agree\b",
            r"\bstudies\s+show\b",
            r"\bscience\s+says\b",
            r"\b\w+\s+said\s+so\b",
        ),
        suggestion=(
            "When citing authorities, provide specific sources and be open to "
            "counter-evidence. Which studies or experts specifically?"
        ),
        resources=(
            _wiki("Appeal to Authority", "Argument_from_authority"),
            _ylfi("When Authorities Aren't Enough", "appeal-to-authority"),
        ),
    ),
]

FALLACY_FALLBACK_SUGGESTION = "Consider strengthening your logical reasoning."
FALLACY_FALLBACK_RESOURCES = (_wiki("Logical Fallacies", "List_of_fallacies"),)


# ============================================================
# TONE GROUPS
# ============================================================

_INSULT_ADVERB = r"(?:(?:really|very|so|completely|totally|absolutely)\s+)?"

INFLAMMATORY_GROUP = PatternGroup(
    subtype="personal_attack",
    label="Personal attack",
    patterns=(
        # Direct attacks
        r"\byou(?:'re|\s+are)\s+(?:stupid|dumb|idiot|moron|fool|ignorant|ridiculous)\b",
        r"\bshut\s+up\b",
        r"\bget\s+lost\b",
        # Third-person attacks
        r"\b(?:they|these\s+people|those\s+people|those\s+folks|people\s+like\s+(?:you|this|that))"
        r"(?:\s+are|'re)\s+" + _INSULT_ADVERB
        + r"(?:stupid|dumb|idiots?|morons?|fools?|ignorant|ridiculous)\b",
        r"\b(?:this|that|these|those)\s+(?:is|are)\s+" + _INSULT_ADVERB
        + r"(?:stupid|dumb|idiotic|moronic|foolish|ignorant|ridiculous)\b",
        # Aggression
        r"\b(?:hate|despise)\s+(?:you|your|them|this|these)\b",
        r"\byou\s+make\s+me\s+(?:sick|angry)\b",
        r"\b(?:makes?|making)\s+me\s+(?:sick|angry)\b",
        # Dismissive labels
        r"\b(?:typical|classic)\s+(?:liberal|conservative|leftist|right-wing)\b",
        r"\bwake\s+up\s+sheeple\b",
        r"\b(?:everyone|anyone)\s+who\s+(?:thinks?|believes?|says?)\s+(?:this|that)\s+is\s+"
        r"(?:stupid|dumb|an?\s+idiot)\b",
        # Profanity aimed at someone
        r"\bf[u*]+ck\s+(?:you|off|this|that|them)\b",
        r"\bbull\s*sh[i*!1]t\b",
    ),
    suggestion=(
        "Consider rephrasing to focus on ideas rather than personal "
        "characteristics. Attack the argument, not the person."
    ),
)

HOSTILE_TONE_GROUP = PatternGroup(
    subtype="hostile_tone",
    label="Hostile tone",
    patterns=(
        r"\bobviously\s+(?:you|they)\s+(?:don't|can't|won't)\b",
        r"\bclearly\s+you\s+(?:don't|can't|haven't)\b",
        r"\banyone\s+with\s+half\s+a\s+brain\b",
        r"\bit's\s+obvious\s+that\s+you\b",
    ),
    suggestion=(
        "Your message may come across as hostile. Consider using more neutral "
        "language to foster constructive dialogue."
    ),
)

# Case-sensitive: four shouted words in a row.
SHOUTING_GROUP = PatternGroup(
    subtype="personal_attack",
    label="All-caps shouting",
    patterns=(r"\b[A-Z]{4,}(?:\s+[A-Z]{4,}){3}\b",),
    flags=0,
)

TONE_RESOURCES = (
    _wiki("Constructive Communication Guide", "Nonviolent_Communication"),
    _wiki("Avoiding Personal Attacks in Discussions", "Ad_hominem"),
)


# ============================================================
# CLARITY GROUPS
# ============================================================

UNSOURCED_GROUP = PatternGroup(
    subtype="unsourced_claim",
    label="Unsourced claim",
    patterns=(
        r"\bstudies\s+show\s+that\b",
        r"\bresearch\s+(?:shows|proves|demonstrates)\b",
        r"\bscientists\s+(?:say|believe|found)\b",
        r"\bit(?:'s|\s+is)\s+(?:proven|a\s+fact)\s+that\b",
        r"\b\d+%\s+of\s+(?:people|users|respondents)\b",
        r"\baccording\s+to\s+(?:experts|studies|research)\b",
        r"\bthe\s+data\s+shows\b",
    ),
    suggestion=(
        "Consider providing specific sources for factual claims. Include links, "
        "citations, or specific study names to strengthen your argument."
    ),
    resources=(
        _wiki("How to Cite Sources", "Citation"),
        _wiki("Evaluating Information Sources", "Source_criticism"),
    ),
)

VAGUE_LANGUAGE_GROUP = PatternGroup(
    subtype="vague_language",
    label="Vague attribution",
    patterns=(
        r"\bsome\s+people\s+say\b",
        r"\bI\s+heard\s+that\b",
        r"\bthey\s+say\s+that\b",
        r"\bword\s+on\s+the\s+street\b",
        r"\brumou?r\s+has\s+it\b",
    ),
)

BIAS_GROUP = PatternGroup(
    subtype="loaded_language",
    label="Loaded language",
    patterns=(
        r"\b(?:obviously|clearly|undeniably)\s+\w+\s+(?:is|are)\b",
        r"\bany\s+reasonable\s+person\s+(?:would|knows)\b",
        r"\bit's\s+common\s+sense\s+that\b",
        r"\bonly\s+\w+\s+would\s+(?:think|believe|say)\b",
        r"\bof\s+course\s+\w+\s+(?:is|are|would)\b",
        r"\b(?:radical|extremist|fanatic)\s+\w+",
        r"\b(?:crazy|insane|lunatic)\s+\w+",
    ),
    suggestion=(
        "Consider using more neutral language to present your argument. Avoid "
        "loaded terms and acknowledge alternative perspectives where relevant."
    ),
    resources=(
        _wiki("Neutral Point of View", "Wikipedia:Neutral_point_of_view"),
        _wiki("Loaded Language", "Loaded_language"),
    ),
)


# ============================================================
# INTROSPECTION
# ============================================================

PATTERN_CATEGORIES: dict[str, list[PatternGroup]] = {
    "fallacy": FALLACY_GROUPS,
    "tone": [INFLAMMATORY_GROUP, HOSTILE_TONE_GROUP, SHOUTING_GROUP],
    "clarity": [UNSOURCED_GROUP, VAGUE_LANGUAGE_GROUP, BIAS_GROUP],
}


def get_pattern_summary(category: str = "all") -> list[dict]:
    """Describe the loaded pattern groups. Used by GET /patterns."""
    categories = PATTERN_CATEGORIES if category == "all" else {
        category: PATTERN_CATEGORIES.get(category, []),
    }
    return [
        {
            "category": name,
            "subtype": group.subtype,
            "label": group.label,
            "pattern_count": len(group.patterns),
            "case_sensitive": not group.flags & re.IGNORECASE,
        }
        for name, groups in categories.items()
        for group in groups
    ]
