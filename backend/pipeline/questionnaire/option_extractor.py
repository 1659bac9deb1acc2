"""Option extraction from a question window.

Walks the window line by line, trying the option markers in a fixed order
(parenthesis, bracket, letter, digit, bullet). Unmarked lines are accepted
as bare-text options only when the context already says "this is a list",
and the walk stops at the first line that belongs to something else: the
next question, a separator or a free-response prompt.

Values are positional slugs (``option_1``, ``option_2``...), never derived
from label text, so they are unique and stable within the question.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from app.models.enums import QuestionType
from pipeline.questionnaire.line_normalizer import clean_text
from pipeline.questionnaire.patterns import (
    FREE_RESPONSE_PROMPT,
    INLINE_MARKER,
    NUMERIC_RANGE,
    OTHER_TOKEN,
    PARENTHETICAL_LINE,
    SEPARATOR_LINE,
    SPECIFY_SIGNAL,
    MarkerType,
    is_yes_no,
    match_option_marker,
    starts_numbered_item,
)

logger = logging.getLogger(__name__)

# Bare-text options must be shorter than this
MAX_BARE_OPTION_LENGTH = 150
MAX_BARE_OPTION_WORDS = 15

# A numeric range wider than this is not a rating scale
MAX_SCALE_SPAN = 10

CHOICE_TYPES = frozenset({QuestionType.RADIO, QuestionType.CHECKBOX, QuestionType.BOOLEAN})


@dataclass(frozen=True)
class ExtractedOption:
    """A single answer option.

    Attributes:
        value: Positional slug, ``option_<n>``.
        label: Cleaned option text, identical in every locale.
        allows_custom_input: True for "Other (please specify)" options.
        marker: Marker type the option was written with, or None for
            bare-text and generated options.
    """

    value: str
    label: str
    allows_custom_input: bool = False
    marker: MarkerType | None = None


def option_slug(ordinal: int) -> str:
    return f"option_{ordinal}"


def allows_custom_input(label: str) -> bool:
    """Check whether an option label asks the respondent to write something.

    Both an "other" token and a specify/write-in/colon co-signal are needed.
    """
    return bool(OTHER_TOKEN.search(label) and SPECIFY_SIGNAL.search(label))


def _is_stop_line(line: str, collected: int) -> bool:
    if not line:
        return True
    if starts_numbered_item(line) or SEPARATOR_LINE.match(line):
        return True
    return collected > 0 and bool(FREE_RESPONSE_PROMPT.match(line))


def _scale_labels(line: str) -> list[str]:
    """Split "( ) 1 ( ) 2 ( ) 3" into ["1", "2", "3"].

    Returns an empty list unless the line carries at least two markers.
    """
    parts = INLINE_MARKER.split(line)
    if len(parts) < 3:
        return []
    return [clean_text(part) for part in parts[1:] if clean_text(part)]


def _accepts_bare_text(line: str, collected: int, question_type: QuestionType) -> bool:
    if not collected and question_type not in CHOICE_TYPES:
        return False
    if is_yes_no(line):
        return True
    return (
        len(line) < MAX_BARE_OPTION_LENGTH
        and len(line.split()) <= MAX_BARE_OPTION_WORDS
        and "?" not in line
        and not PARENTHETICAL_LINE.match(line)
        and not FREE_RESPONSE_PROMPT.match(line)
    )


def _skip_instructions(window: Sequence[str]) -> int:
    start = 0
    while start < len(window) and PARENTHETICAL_LINE.match(window[start].strip()):
        start += 1
    return start


def extract_options(
    window: Sequence[str],
    question_type: QuestionType | str,
) -> list[ExtractedOption]:
    """Extract the ordered option list of a question.

    Args:
        window: Lines following the question.
        question_type: Classified type. Bare-text lines are accepted
            before any marked option only for radio/checkbox/boolean.

    Returns:
        Options in extraction order with slugs option_1..option_n.
    """
    question_type = QuestionType(question_type)
    labels: list[tuple[str, MarkerType | None]] = []

    for raw in window[_skip_instructions(window):]:
        line = raw.strip()
        if _is_stop_line(line, len(labels)):
            break

        matched = match_option_marker(line)
        if matched:
            marker, label = matched
            scale = _scale_labels(line)
            if scale:
                labels.extend((value, marker.marker_type) for value in scale)
            else:
                labels.append((clean_text(label), marker.marker_type))
            continue

        if _accepts_bare_text(line, len(labels), question_type):
            labels.append((clean_text(line), None))
            continue
        break

    options = [
        ExtractedOption(
            value=option_slug(ordinal),
            label=label,
            allows_custom_input=allows_custom_input(label),
            marker=marker,
        )
        for ordinal, (label, marker) in enumerate(labels, start=1)
    ]

    # A trailing "Other" is a write-in even without "please specify"
    flagged = any(option.allows_custom_input for option in options)
    if options and not flagged and OTHER_TOKEN.search(options[-1].label):
        options[-1] = replace(options[-1], allows_custom_input=True)

    logger.debug(f"Extracted {len(options)} options ({question_type.value})")
    return options


def generate_scale_options(*texts: str) -> list[ExtractedOption]:
    """Generate "1".."N" options from a numeric range such as "1 to 5".

    The first range found in ``texts`` is used. Ranges that run backwards
    or span more than ten steps produce no options.
    """
    for text in texts:
        match = NUMERIC_RANGE.search(text)
        if not match:
            continue
        low, high = int(match.group("low")), int(match.group("high"))
        if low >= high or high - low > MAX_SCALE_SPAN:
            continue
        return [
            ExtractedOption(value=option_slug(ordinal), label=str(number))
            for ordinal, number in enumerate(range(low, high + 1), start=1)
        ]
    return []
