"""Questionnaire parser: extracted document in, questionnaire tree out.

Runs the stages in order:

1. Normalize the extracted lines.
2. Build the emphasis index from the HTML rendering.
3. Detect section, subsection and question boundaries.
4. Slice a window for every question.
5. Classify each question, extract its options and resolve its help text.
6. Assemble the tree.

The parser is pure and synchronous. Any text input produces a tree;
only input-contract violations (non-string lines or html) raise.

Usage:
    from pipeline.questionnaire import parse_questionnaire

    tree = parse_questionnaire(lines, html)
    for section in tree.sections:
        print(section.title.en, len(section.questions))
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.schemas.questionnaire import QuestionnaireTreeSchema
from pipeline.questionnaire.assembler import ResolvedQuestion, assemble_tree
from pipeline.questionnaire.boundaries import detect_boundaries
from pipeline.questionnaire.classifier import Candidate, classify_question
from pipeline.questionnaire.emphasis import EmphasisIndex, build_emphasis_index
from pipeline.questionnaire.help_text import resolve_help_text
from pipeline.questionnaire.line_normalizer import normalize_lines, split_text
from pipeline.questionnaire.option_extractor import extract_options, generate_scale_options
from pipeline.questionnaire.windows import QuestionWindow, build_windows

logger = logging.getLogger(__name__)

# Rating questions with fewer options than this fall back to a generated scale
MIN_RATING_OPTIONS = 3


@dataclass(frozen=True)
class ParserOptions:
    """Tunable limits of the parser.

    Attributes:
        window_size: Maximum number of lines in a question window.
        help_text_min_length: Parenthesised help text must be longer.
        select_threshold: Single-choice questions with more options than
            this are rendered as select.
        lookahead: Lines inspected when deciding whether "3. Title" is a
            question or a section heading.
    """

    window_size: int = 20
    help_text_min_length: int = 10
    select_threshold: int = 10
    lookahead: int = 20


def _validate_input(lines: object, html: object) -> None:
    if isinstance(lines, str | bytes) or not isinstance(lines, Sequence):
        raise TypeError(f"lines must be a sequence of strings, got {type(lines).__name__}")
    for i, line in enumerate(lines):
        if not isinstance(line, str):
            raise TypeError(f"lines[{i}] must be a string, got {type(line).__name__}")
    if not isinstance(html, str):
        raise TypeError(f"html must be a string, got {type(html).__name__}")


class QuestionnaireParser:
    """Parses extracted survey documents into questionnaire trees.

    The parser holds only its options; every call to :meth:`parse` builds
    fresh state, so one instance can be reused across documents.
    """

    def __init__(self, options: ParserOptions | None = None):
        self.options = options or ParserOptions()

    def resolve_question(
        self, window: QuestionWindow, emphasis_index: EmphasisIndex
    ) -> ResolvedQuestion:
        """Classify one question and collect its options and help text."""
        question_text = window.question.raw_text
        classification = classify_question(question_text, window.lines)
        options = extract_options(window.lines, classification.question_type)

        if classification.candidate == Candidate.RATING and len(options) < MIN_RATING_OPTIONS:
            generated = generate_scale_options(question_text, *window.lines)
            if generated:
                options = generated

        help_text = resolve_help_text(
            question_text,
            window.lines,
            emphasis_index,
            min_length=self.options.help_text_min_length,
        )
        logger.debug(
            f"Question {window.question.number or '-'}: {classification.question_type.value} "
            f"({classification.confidence:.2f}), {len(options)} options"
        )
        return ResolvedQuestion(
            start=window.question,
            classification=classification,
            options=tuple(options),
            help_text=help_text,
        )

    def parse(self, lines: Sequence[str], html: str = "") -> QuestionnaireTreeSchema:
        """Parse an extracted document.

        Args:
            lines: Document text split into lines, in original order.
            html: HTML rendering of the same document. May be empty.

        Returns:
            QuestionnaireTreeSchema.

        Raises:
            TypeError: If lines is not a sequence of strings or html is
                not a string.
        """
        _validate_input(lines, html)

        texts = [line.text for line in normalize_lines(lines)]
        emphasis_index = build_emphasis_index(html)
        boundaries = detect_boundaries(
            texts,
            strong_texts=emphasis_index.strong_texts,
            lookahead=self.options.lookahead,
        )
        windows = build_windows(texts, boundaries, max_lines=self.options.window_size)
        questions = [self.resolve_question(window, emphasis_index) for window in windows]

        tree = assemble_tree(
            boundaries, questions, select_threshold=self.options.select_threshold
        )
        logger.info(
            f"Parsed {len(texts)} lines into {tree.metadata.total_sections} sections, "
            f"{tree.metadata.total_questions} questions, {tree.metadata.total_options} options"
        )
        return tree

    def parse_text(self, text: str, html: str = "") -> QuestionnaireTreeSchema:
        """Parse raw extracted text, splitting it into lines first."""
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        return self.parse(split_text(text), html)


def parse_questionnaire(
    lines: Sequence[str],
    html: str = "",
    options: ParserOptions | None = None,
) -> QuestionnaireTreeSchema:
    """Parse an extracted document with a one-off parser."""
    return QuestionnaireParser(options).parse(lines, html)


def parse_text(
    text: str,
    html: str = "",
    options: ParserOptions | None = None,
) -> QuestionnaireTreeSchema:
    """Parse raw extracted text with a one-off parser."""
    return QuestionnaireParser(options).parse_text(text, html)

