"""Tests for question type classification."""

import pytest

from app.models.enums import QuestionType
from pipeline.questionnaire.classifier import (
    SCORING_RULES,
    Candidate,
    ScoreDelta,
    Scores,
    classify_question,
    free_response_override,
    score_question,
)

SATISFACTION_WINDOW = [
    "( ) Very satisfied",
    "( ) Satisfied",
    "( ) Neutral",
    "( ) Unsatisfied",
    "( ) Very unsatisfied",
]


class TestScores:
    """Tests for the immutable score record."""

    def test_apply_returns_new_record(self) -> None:
        """Applying a delta never mutates the original."""
        scores = Scores()
        updated = scores.apply(ScoreDelta(boosts={Candidate.RADIO: 50}))
        assert scores.radio == 0
        assert updated.radio == 50

    def test_scores_floor_at_zero(self) -> None:
        """Penalties cannot push a score below zero."""
        scores = Scores(radio=30).apply(ScoreDelta(boosts={Candidate.RADIO: -100}))
        assert scores.radio == 0

    def test_zeroed_candidates(self) -> None:
        """Zeroed candidates are reset after the boosts."""
        delta = ScoreDelta(boosts={Candidate.TEXT: 40}, zeroed=frozenset({Candidate.TEXT}))
        assert Scores(text=80).apply(delta).text == 0

    def test_tie_break_priority(self) -> None:
        """Ties go to boolean, then radio, checkbox, rating, textarea, text."""
        assert Scores(radio=100, checkbox=100).best() == Candidate.RADIO
        assert Scores(boolean=50, radio=50).best() == Candidate.BOOLEAN
        assert Scores(rating=70, textarea=70, text=70).best() == Candidate.RATING
        assert Scores(textarea=10, text=10).best() == Candidate.TEXTAREA

    def test_all_zero_is_text(self) -> None:
        """With no signal at all, the winner is text."""
        assert Scores().best() == Candidate.TEXT

    def test_rules_are_named_and_ordered(self) -> None:
        """Every rule is named; the yes/no pair runs first."""
        names = [rule.name for rule in SCORING_RULES]
        assert names[0] == "yes_no_pair"
        assert names[-2:] == ["option_context", "no_option_penalty"]
        assert len(set(names)) == len(names)


class TestClassifyQuestion:
    """Tests for classify_question."""

    def test_yes_no_pair_is_boolean(self) -> None:
        """Two yes/no lines make a boolean question."""
        result = classify_question("3.1 A keni përvojë?", ["( ) Po", "( ) Jo"])
        assert result.question_type == QuestionType.BOOLEAN
        assert "yes_no_pair" in result.matched_rules

    @pytest.mark.parametrize("window", [["Yes", "No"], ["[ ] Да", "[ ] Не"], ["- Da", "- Ne"]])
    def test_yes_no_any_locale_and_marker(self, window: list[str]) -> None:
        """Yes/no tokens are recognised in every locale, marked or not."""
        assert classify_question("Do you agree?", window).question_type == QuestionType.BOOLEAN

    def test_rating_vocabulary_with_options_is_radio(self) -> None:
        """Descriptive wording does not beat a real option list."""
        result = classify_question("Please describe your satisfaction level", SATISFACTION_WINDOW)
        assert result.question_type == QuestionType.RADIO
        assert not result.override

    def test_free_response_override_in_question(self) -> None:
        """A free-response instruction wins over option markers."""
        result = classify_question(
            "4.2 Ju lutem shkruani përgjigjen tuaj këtu",
            ["( ) Po", "( ) Jo", "( ) Ndoshta"],
        )
        assert result.question_type == QuestionType.TEXTAREA
        assert result.override
        assert result.confidence == 0.99
        assert result.matched_rules == ()

    def test_free_response_override_in_window(self) -> None:
        """The instruction may sit in the first window lines."""
        result = classify_question("5.1 Komentet tuaja", ["Lini një koment më poshtë", "________"])
        assert result.question_type == QuestionType.TEXTAREA
        assert result.confidence == 0.98

    def test_override_ignores_marked_lines(self) -> None:
        """An option that happens to contain the phrase does not override."""
        assert free_response_override("Question", ["( ) Write your answer here"]) is None

    def test_brackets_make_checkbox(self) -> None:
        """Bracket markers signal multiple choice."""
        result = classify_question(
            "2.3 Which services do you use?",
            ["[ ] Banking", "[ ] Insurance", "[ ] Pensions"],
        )
        assert result.question_type == QuestionType.CHECKBOX

    def test_select_all_phrase_with_bullets(self) -> None:
        """A "select all" instruction turns a bullet list into checkboxes."""
        result = classify_question(
            "Which channels do you use? Select all that apply",
            ["• Email", "• Phone", "• Social media"],
        )
        assert result.question_type == QuestionType.CHECKBOX

    def test_parentheses_make_radio(self) -> None:
        """Parenthesis markers signal a single choice."""
        result = classify_question(
            "1.4 Sa punonjës keni?",
            ["( ) 1-10", "( ) 11-50", "( ) Mbi 50"],
        )
        assert result.question_type == QuestionType.RADIO

    def test_open_question_is_text(self) -> None:
        """A short question without options is a text question."""
        result = classify_question("1.1 What is your full name?", [])
        assert result.question_type == QuestionType.TEXT
        assert result.candidate == Candidate.TEXT

    def test_explain_question_is_textarea(self) -> None:
        """Explanatory vocabulary without options means a long answer."""
        result = classify_question("6.2 Shpjegoni pse e keni zgjedhur këtë metodë", [])
        assert result.question_type == QuestionType.TEXTAREA

    def test_rating_without_options_renders_radio(self) -> None:
        """A rating question renders as radio even before options exist."""
        result = classify_question("How satisfied are you, on a scale from 1 to 5?", [])
        assert result.candidate == Candidate.RATING
        assert result.question_type == QuestionType.RADIO

    def test_blank_fill_boosts_textarea(self) -> None:
        """A blank line always counts towards a written answer."""
        result = classify_question("3.1 Adresa e organizatës", ["______________________"])
        assert result.scores.textarea == 40
        assert result.scores.text == 40
        assert result.question_type == QuestionType.TEXTAREA
        assert "blank_fill" in result.matched_rules

    def test_blank_fill_long_question_no_text_boost(self) -> None:
        """Only short questions add the single-line boost."""
        question = "3.2 " + " ".join(["fjalë"] * 12)
        result = classify_question(question, ["____________"])
        assert result.scores.text == 0
        assert result.scores.textarea == 40

    def test_blank_fill_short_answer_vocabulary(self) -> None:
        """Short-answer wording still wins over the blank line."""
        result = classify_question("1.1 Emri i organizatës", ["____________"])
        assert result.question_type == QuestionType.TEXT

    def test_no_signal_confidence(self) -> None:
        """With every score at zero, confidence is 0.3."""
        result = classify_question("1.3 Qyteti", [])
        assert result.question_type == QuestionType.TEXT
        assert result.confidence == 0.3

    def test_confidence_capped(self) -> None:
        """Confidence never exceeds 0.99."""
        result = classify_question("3.1 A keni përvojë?", ["( ) Po", "( ) Jo"])
        assert result.confidence == 0.99

    def test_independent_per_question(self) -> None:
        """Scores are rebuilt from scratch for every question."""
        first, _ = score_question("Do you agree?", ["( ) Yes", "( ) No"])
        second, _ = score_question("Do you agree?", ["( ) Yes", "( ) No"])
        assert first == second
