"""Boundary detection for normalized questionnaire lines.

A boundary is a structurally significant line: a section heading, a
series subsection ("(3/12)") or the start of a question. Each line is
classified into at most one boundary; the first matching rule wins:

1. Comment-style marker ("# Title", "// Title", "-- Title")   -> section
2. Named heading ("Section 2:", "Pjesa 1:", "Odeljak 3:")      -> section
3. Numbered top-level heading ("3. Title")                     -> section
   (subject to the numbered-line policy below)
4. Series counter ("Title (3/12)")                             -> subsection
5. Hierarchical number with letter suffix ("1.1.2.a Text")     -> question
6. Hierarchical number ("3.1 Text")                            -> question
7. Simple numbered item ("7. text")                            -> question
8. Prefixed number ("Q4. Text", "Pyetja 4: Text")              -> question
9. Bold line from the emphasis index                           -> section

Numbered-line policy: "3. Title" and "3. Question" share a shape. A single
segment numbered line is a question when it ends with "?", or when the
document has no hierarchical numbering and an option-like line follows it
before the next numbered line. Otherwise it is a section heading.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pipeline.questionnaire.line_normalizer import clean_text, strip_trailing_line_number
from pipeline.questionnaire.patterns import (
    ANY_NUMBERED,
    COMMENT_HEADING,
    HIERARCHICAL_LETTER_NUMBER,
    HIERARCHICAL_NUMBER,
    NAMED_HEADING,
    NUMBERED_HEADING,
    PARENTHETICAL_LINE,
    PREFIXED_NUMBER,
    SEPARATOR_LINE,
    SERIES_COUNTER,
    SIMPLE_NUMBER,
    is_meta_line,
    is_option_like,
    is_scale_line,
)

logger = logging.getLogger(__name__)

# Section-family headings must fall inside this length range (exclusive)
MIN_HEADING_LENGTH = 5
MAX_HEADING_LENGTH = 150

# Bold lines longer than this are emphasized prose, not headings
MAX_STRONG_HEADING_LENGTH = 60


@dataclass(frozen=True)
class SectionHeading:
    """A top-level section boundary."""

    position: int
    title: str
    level: int = 1


@dataclass(frozen=True)
class SubsectionHeading:
    """A titled grouping inside a section, e.g. "Data collection (2/5)"."""

    position: int
    title: str
    series_position: int
    series_total: int


@dataclass(frozen=True)
class QuestionStart:
    """The first line of a question.

    Attributes:
        position: Index of the line in the normalized line list.
        number: Question number as written ("3.1", "1.1.2.a"), or None
            for unnumbered questions.
        raw_text: The full line, number included.
    """

    position: int
    number: str | None
    raw_text: str


Boundary = SectionHeading | SubsectionHeading | QuestionStart


def clean_heading_title(line: str) -> str:
    """Clean a section/subsection title.

    Strips comment prefixes and a trailing line counter while keeping the
    leading section number and any "(n/N)" suffix.
    """
    comment = COMMENT_HEADING.match(line)
    title = comment.group("title") if comment else line
    return strip_trailing_line_number(clean_text(title))


def _is_heading_length(line: str) -> bool:
    return MIN_HEADING_LENGTH < len(line) < MAX_HEADING_LENGTH


def _has_hierarchical_numbering(lines: Sequence[str]) -> bool:
    return any(
        HIERARCHICAL_LETTER_NUMBER.match(line) or HIERARCHICAL_NUMBER.match(line)
        for line in lines
    )


def _options_follow(lines: Sequence[str], position: int, lookahead: int) -> bool:
    """Check whether option-like lines follow before the next numbered line."""
    end = min(len(lines), position + 1 + lookahead)
    for line in lines[position + 1 : end]:
        if ANY_NUMBERED.match(line):
            return False
        if is_option_like(line):
            return True
    return False


def numbered_line_is_question(
    lines: Sequence[str],
    position: int,
    hierarchical_document: bool,
    lookahead: int = 20,
) -> bool:
    """Decide whether a "3. Capitalised ..." line starts a question.

    Args:
        lines: Normalized line texts.
        position: Index of the numbered line.
        hierarchical_document: True if any line uses "3.1"-style numbering.
        lookahead: Maximum number of following lines to inspect.
    """
    line = lines[position]
    if line.rstrip().endswith("?"):
        return True
    if hierarchical_document:
        return False
    return _options_follow(lines, position, lookahead)


def _classify_heading(
    lines: Sequence[str],
    position: int,
    hierarchical_document: bool,
    lookahead: int,
) -> Boundary | None:
    """Apply the section-family rules (1-4) to a line."""
    line = lines[position]
    if not _is_heading_length(line) or is_scale_line(line):
        return None

    comment = COMMENT_HEADING.match(line)
    if comment:
        prefix = comment.group("prefix")
        level = len(prefix) if prefix.startswith("#") else 1
        return SectionHeading(position=position, title=clean_heading_title(line), level=level)

    if NAMED_HEADING.match(line):
        return SectionHeading(position=position, title=clean_heading_title(line))

    if (
        NUMBERED_HEADING.match(line)
        and not HIERARCHICAL_NUMBER.match(line)
        and not numbered_line_is_question(lines, position, hierarchical_document, lookahead)
    ):
        return SectionHeading(position=position, title=clean_heading_title(line))

    series = SERIES_COUNTER.search(line)
    if series:
        return SubsectionHeading(
            position=position,
            title=clean_heading_title(line),
            series_position=int(series.group("position")),
            series_total=int(series.group("total")),
        )

    return None


def _classify_question(line: str, position: int) -> QuestionStart | None:
    """Apply the question rules (5-8) to a line."""
    for pattern in (HIERARCHICAL_LETTER_NUMBER, HIERARCHICAL_NUMBER, SIMPLE_NUMBER, PREFIXED_NUMBER):
        match = pattern.match(line)
        if match:
            return QuestionStart(position=position, number=match.group("number"), raw_text=line)
    return None


def _is_strong_heading(line: str, strong_texts: frozenset[str]) -> bool:
    return (
        line in strong_texts
        and MIN_HEADING_LENGTH < len(line) < MAX_STRONG_HEADING_LENGTH
        and not is_option_like(line)
        and not line.endswith("?")
    )


def _is_fallback_candidate(line: str) -> bool:
    return not (
        is_option_like(line)
        or is_meta_line(line)
        or PARENTHETICAL_LINE.match(line)
        or SEPARATOR_LINE.match(line)
        or is_scale_line(line)
    )


def _unnumbered_questions(
    lines: Sequence[str], boundaries: list[Boundary]
) -> list[QuestionStart]:
    """Pick best-effort question starts for a document without numbering.

    Lines ending with "?" are preferred; when there are none, every line
    that does not look like an option, instruction or separator is used.
    Intro, thank-you and title lines are never picked.
    """
    taken = {boundary.position for boundary in boundaries}
    candidates = [
        position
        for position, line in enumerate(lines)
        if position not in taken and _is_fallback_candidate(line)
    ]
    interrogative = [p for p in candidates if lines[p].endswith("?")]
    chosen = interrogative or candidates
    return [QuestionStart(position=p, number=None, raw_text=lines[p]) for p in chosen]


def detect_boundaries(
    lines: Sequence[str],
    strong_texts: frozenset[str] = frozenset(),
    lookahead: int = 20,
) -> list[Boundary]:
    """Classify normalized lines into boundaries.

    Args:
        lines: Normalized line texts in document order.
        strong_texts: Bold span texts from the emphasis index.
        lookahead: Lines inspected by the numbered-line policy.

    Returns:
        Boundaries ordered by position.
    """
    hierarchical_document = _has_hierarchical_numbering(lines)
    boundaries: list[Boundary] = []

    for position, line in enumerate(lines):
        boundary = _classify_heading(lines, position, hierarchical_document, lookahead)
        if boundary is None:
            boundary = _classify_question(line, position)
        if boundary is None and _is_strong_heading(line, strong_texts):
            boundary = SectionHeading(position=position, title=clean_heading_title(line))
        if boundary is not None:
            boundaries.append(boundary)

    if not any(isinstance(b, QuestionStart) for b in boundaries):
        fallback = _unnumbered_questions(lines, boundaries)
        if fallback:
            logger.info(
                f"No numbered questions found, using {len(fallback)} unnumbered question starts"
            )
            boundaries = sorted([*boundaries, *fallback], key=lambda b: b.position)

    logger.debug(
        f"Detected {len(boundaries)} boundaries "
        f"({sum(isinstance(b, QuestionStart) for b in boundaries)} questions)"
    )
    return boundaries
