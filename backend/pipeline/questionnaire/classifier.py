"""Question type classification.

A question and its window are scored against six candidates (radio,
checkbox, boolean, textarea, text, rating). Each signal is a named
ScoringRule: a pure function of the question text and window that returns
a ScoreDelta. The deltas are folded, in rule order, into a fresh Scores
record for every question; nothing is shared between questions.

A free-response instruction ("Ju lutem shkruani përgjigjen tuaj këtu")
short-circuits the scoring and fixes the type to textarea.

Winner selection uses the fixed priority
boolean > radio > checkbox > rating > textarea > text to break ties.
A rating winner is rendered as a radio question.
"""

import enum
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, fields, replace

from app.models.enums import QuestionType
from pipeline.questionnaire.patterns import (
    BLANK_FILL,
    FREE_RESPONSE_PHRASE,
    FREE_TEXT_VOCABULARY,
    NUMERIC_RANGE,
    RATING_VOCABULARY,
    SELECT_ALL_PHRASE,
    SELECT_ONE_PHRASE,
    SHORT_ANSWER_VOCABULARY,
    WHY_VOCABULARY,
    YES_NO_LINE,
    MarkerType,
    is_option_like,
    is_option_marked,
    is_scale_line,
    match_option_marker,
)

logger = logging.getLogger(__name__)


class Candidate(enum.StrEnum):
    """Scoring candidates. RATING exists only during scoring."""

    RADIO = "radio"
    CHECKBOX = "checkbox"
    BOOLEAN = "boolean"
    TEXTAREA = "textarea"
    TEXT = "text"
    RATING = "rating"


# Tie-break order, highest priority first
PRIORITY: tuple[Candidate, ...] = (
    Candidate.BOOLEAN,
    Candidate.RADIO,
    Candidate.CHECKBOX,
    Candidate.RATING,
    Candidate.TEXTAREA,
    Candidate.TEXT,
)

RENDERED_TYPE: dict[Candidate, QuestionType] = {
    Candidate.RADIO: QuestionType.RADIO,
    Candidate.CHECKBOX: QuestionType.CHECKBOX,
    Candidate.BOOLEAN: QuestionType.BOOLEAN,
    Candidate.TEXTAREA: QuestionType.TEXTAREA,
    Candidate.TEXT: QuestionType.TEXT,
    Candidate.RATING: QuestionType.RADIO,
}

# Window lines inspected for a free-response instruction
OVERRIDE_WINDOW_LINES = 3
OVERRIDE_CONFIDENCE_QUESTION = 0.99
OVERRIDE_CONFIDENCE_WINDOW = 0.98

MAX_CONFIDENCE = 0.99
DEFAULT_CONFIDENCE = 0.3

# Questions longer than this (in words) lean towards a long answer
LONG_QUESTION_WORDS = 20
# Blank-fill questions shorter than this (in words) also score as a short answer
SHORT_BLANK_QUESTION_WORDS = 12

# Option-like lines from which the window counts as a real option list
OPTION_LIST_MIN = 3


# ============================================================
# SCORE RECORDS
# ============================================================


@dataclass(frozen=True)
class ScoreDelta:
    """Adjustment produced by one scoring rule.

    Attributes:
        boosts: Amount added to each candidate (negative values penalize).
        zeroed: Candidates forced to 0 after the boosts are applied.
    """

    boosts: Mapping[Candidate, int] = field(default_factory=dict)
    zeroed: frozenset[Candidate] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.boosts and not self.zeroed


NO_CHANGE = ScoreDelta()


@dataclass(frozen=True)
class Scores:
    """Non-negative score per candidate."""

    radio: int = 0
    checkbox: int = 0
    boolean: int = 0
    textarea: int = 0
    text: int = 0
    rating: int = 0

    def get(self, candidate: Candidate) -> int:
        return getattr(self, candidate.value)

    def apply(self, delta: ScoreDelta) -> "Scores":
        """Return a new record with ``delta`` applied, floored at 0."""
        changes: dict[str, int] = {}
        for candidate, amount in delta.boosts.items():
            changes[candidate.value] = max(0, self.get(candidate) + amount)
        for candidate in delta.zeroed:
            changes[candidate.value] = 0
        return replace(self, **changes)

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def best(self) -> Candidate:
        """Return the winning candidate; TEXT when every score is 0."""
        winner = max(PRIORITY, key=self.get)
        if self.get(winner) == 0:
            return Candidate.TEXT
        return winner


@dataclass(frozen=True)
class ScoringRule:
    """A named signal contributing to the scores."""

    name: str
    score: Callable[[str, Sequence[str]], ScoreDelta]


@dataclass(frozen=True)
class Classification:
    """Result of classifying one question.

    Attributes:
        candidate: Winning scoring candidate (may be RATING).
        question_type: Rendered question type.
        confidence: Value in [0, 0.99].
        scores: Final score record (all zero when overridden).
        override: True when a free-response instruction decided the type.
        matched_rules: Names of the rules that changed the scores.
    """

    candidate: Candidate
    question_type: QuestionType
    confidence: float
    scores: Scores
    override: bool = False
    matched_rules: tuple[str, ...] = ()


# ============================================================
# SCORING RULES
# ============================================================


def _word_count(text: str) -> int:
    return len(text.split())


def _option_like_count(window: Sequence[str]) -> int:
    return sum(1 for line in window if is_option_like(line))


def _has_marker(window: Sequence[str], marker_type: MarkerType) -> bool:
    for line in window:
        matched = match_option_marker(line.strip())
        if matched and matched[0].marker_type == marker_type:
            return True
    return False


def _yes_no_pair(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if sum(1 for line in window if YES_NO_LINE.match(line.strip())) != 2:
        return NO_CHANGE
    return ScoreDelta(boosts={Candidate.BOOLEAN: 300, Candidate.RADIO: 50})


def _select_all_phrase(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if SELECT_ALL_PHRASE.search(question_text) or any(
        SELECT_ALL_PHRASE.search(line) for line in window
    ):
        return ScoreDelta(boosts={Candidate.CHECKBOX: 90})
    return NO_CHANGE


def _select_one_phrase(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if SELECT_ONE_PHRASE.search(question_text) or any(
        SELECT_ONE_PHRASE.search(line) for line in window
    ):
        return ScoreDelta(boosts={Candidate.RADIO: 80})
    return NO_CHANGE


def _rating_vocabulary(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if RATING_VOCABULARY.search(question_text):
        return ScoreDelta(boosts={Candidate.RATING: 70, Candidate.RADIO: 40})
    return NO_CHANGE


def _rating_scale(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if NUMERIC_RANGE.search(question_text) or any(is_scale_line(line) for line in window):
        return ScoreDelta(boosts={Candidate.RATING: 50, Candidate.RADIO: 60})
    return NO_CHANGE


def _free_text_vocabulary(question_text: str, window: Sequence[str]) -> ScoreDelta:
    boost = 0
    if FREE_TEXT_VOCABULARY.search(question_text):
        boost += 70
    if WHY_VOCABULARY.search(question_text):
        boost += 50
    if not boost:
        return NO_CHANGE
    return ScoreDelta(boosts={Candidate.TEXTAREA: boost})


def _short_answer_vocabulary(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if SHORT_ANSWER_VOCABULARY.search(question_text):
        return ScoreDelta(boosts={Candidate.TEXT: 65})
    return NO_CHANGE


def _blank_fill(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if _option_like_count(window) or not any(BLANK_FILL.search(line) for line in window):
        return NO_CHANGE
    boosts = {Candidate.TEXTAREA: 40}
    if _word_count(question_text) < SHORT_BLANK_QUESTION_WORDS:
        boosts[Candidate.TEXT] = 40
    return ScoreDelta(boosts=boosts)


def _long_question(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if _word_count(question_text) > LONG_QUESTION_WORDS:
        return ScoreDelta(boosts={Candidate.TEXTAREA: 30})
    return NO_CHANGE


def _bracket_markers(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if _has_marker(window, MarkerType.BRACKET):
        return ScoreDelta(boosts={Candidate.CHECKBOX: 100, Candidate.RADIO: -50})
    return NO_CHANGE


def _paren_markers(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if _has_marker(window, MarkerType.PARENTHESIS):
        return ScoreDelta(boosts={Candidate.RADIO: 100, Candidate.CHECKBOX: -50})
    return NO_CHANGE


def _option_context(question_text: str, window: Sequence[str]) -> ScoreDelta:
    count = _option_like_count(window)
    if count >= OPTION_LIST_MIN:
        return ScoreDelta(
            boosts={Candidate.RADIO: 150, Candidate.CHECKBOX: 100},
            zeroed=frozenset({Candidate.TEXT, Candidate.TEXTAREA}),
        )
    if count:
        return ScoreDelta(
            boosts={Candidate.TEXT: -100, Candidate.TEXTAREA: -150, Candidate.RADIO: 50}
        )
    return NO_CHANGE


def _no_option_penalty(question_text: str, window: Sequence[str]) -> ScoreDelta:
    if _option_like_count(window) or any(is_scale_line(line) for line in window):
        return NO_CHANGE
    return ScoreDelta(boosts={Candidate.RADIO: -40, Candidate.CHECKBOX: -40})


SCORING_RULES: list[ScoringRule] = [
    ScoringRule("yes_no_pair", _yes_no_pair),
    ScoringRule("select_all_phrase", _select_all_phrase),
    ScoringRule("select_one_phrase", _select_one_phrase),
    ScoringRule("rating_vocabulary", _rating_vocabulary),
    ScoringRule("rating_scale", _rating_scale),
    ScoringRule("free_text_vocabulary", _free_text_vocabulary),
    ScoringRule("short_answer_vocabulary", _short_answer_vocabulary),
    ScoringRule("blank_fill", _blank_fill),
    ScoringRule("long_question", _long_question),
    ScoringRule("bracket_markers", _bracket_markers),
    ScoringRule("paren_markers", _paren_markers),
    ScoringRule("option_context", _option_context),
    ScoringRule("no_option_penalty", _no_option_penalty),
]


# ============================================================
# CLASSIFICATION
# ============================================================


def free_response_override(question_text: str, window: Sequence[str]) -> float | None:
    """Return the override confidence if a free-response instruction is present.

    The question text is checked first, then the first three window lines
    that are not themselves option-marked.
    """
    if FREE_RESPONSE_PHRASE.search(question_text):
        return OVERRIDE_CONFIDENCE_QUESTION
    for line in window[:OVERRIDE_WINDOW_LINES]:
        if not is_option_marked(line) and FREE_RESPONSE_PHRASE.search(line):
            return OVERRIDE_CONFIDENCE_WINDOW
    return None


def score_question(
    question_text: str,
    window: Sequence[str],
    rules: Sequence[ScoringRule] = SCORING_RULES,
) -> tuple[Scores, tuple[str, ...]]:
    """Fold every rule into a fresh score record.

    Returns:
        Tuple of (final scores, names of the rules that matched).
    """
    scores = Scores()
    matched: list[str] = []
    for rule in rules:
        delta = rule.score(question_text, window)
        if delta.is_empty:
            continue
        matched.append(rule.name)
        scores = scores.apply(delta)
    return scores, tuple(matched)


def classify_question(question_text: str, window: Sequence[str]) -> Classification:
    """Classify a question from its text and window.

    Args:
        question_text: Full question line, numbering included.
        window: Lines following the question up to the next boundary.

    Returns:
        Classification with the rendered type and its confidence.
    """
    window = list(window)
    override_confidence = free_response_override(question_text, window)
    if override_confidence is not None:
        return Classification(
            candidate=Candidate.TEXTAREA,
            question_type=QuestionType.TEXTAREA,
            confidence=override_confidence,
            scores=Scores(),
            override=True,
        )

    scores, matched = score_question(question_text, window)
    candidate = scores.best()
    top = scores.get(candidate)
    confidence = min(top / 100, MAX_CONFIDENCE) if top else DEFAULT_CONFIDENCE

    logger.debug(
        f"Classified {question_text[:40]!r} as {candidate} "
        f"(scores={scores.as_dict()}, rules={list(matched)})"
    )
    return Classification(
        candidate=candidate,
        question_type=RENDERED_TYPE[candidate],
        confidence=confidence,
        scores=scores,
        matched_rules=matched,
    )
