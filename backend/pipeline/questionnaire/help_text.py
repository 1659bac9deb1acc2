"""Help text for questions.

Instructions usually sit in parentheses right under the question
("(Ju lutem zgjidhni vetëm një nga opsionet e mëposhtme)"). When there is
none, the nearest italic span after the question in the HTML rendering is
used instead.
"""

from collections.abc import Sequence

from pipeline.questionnaire.emphasis import EmphasisIndex
from pipeline.questionnaire.line_normalizer import clean_text
from pipeline.questionnaire.patterns import (
    PARENTHETICAL_LINE,
    is_option_marked,
    is_question_number,
    is_yes_no,
)


def parenthetical_help_text(window: Sequence[str], min_length: int = 10) -> str:
    """Collect parenthesised instruction lines from a window.

    Lines are scanned until the first option-marked line or question
    number. Qualifying lines are joined with a space.
    """
    parts: list[str] = []
    for raw in window:
        line = raw.strip()
        if is_option_marked(line) or is_question_number(line):
            break
        match = PARENTHETICAL_LINE.match(line)
        if not match:
            continue
        content = clean_text(match.group("content"))
        if len(content) <= min_length or is_yes_no(content):
            continue
        parts.append(content)
    return " ".join(parts)


def resolve_help_text(
    question_text: str,
    window: Sequence[str],
    emphasis_index: EmphasisIndex | None = None,
    min_length: int = 10,
) -> str:
    """Resolve the help text of a question.

    Args:
        question_text: Full question line.
        window: Lines following the question.
        emphasis_index: Emphasis index of the document, if any.
        min_length: Parenthesised text must be longer than this.

    Returns:
        The help text, or "" when no source yields any.
    """
    help_text = parenthetical_help_text(window, min_length)
    if help_text:
        return help_text
    if emphasis_index is None or emphasis_index.is_empty:
        return ""
    return emphasis_index.emphasis_after(question_text)
