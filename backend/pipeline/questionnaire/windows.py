"""Lookahead windows for detected questions.

For each question boundary the window is the run of lines up to the next
boundary of any kind. The classifier, option extractor and help-text
resolver only ever look at a question and its window.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from pipeline.questionnaire.boundaries import Boundary, QuestionStart


@dataclass(frozen=True)
class QuestionWindow:
    """A question boundary and the lines that follow it."""

    question: QuestionStart
    lines: tuple[str, ...]


def build_windows(
    lines: Sequence[str],
    boundaries: Sequence[Boundary],
    max_lines: int = 20,
) -> list[QuestionWindow]:
    """Slice the window of every question boundary.

    Args:
        lines: Normalized line texts.
        boundaries: Boundaries ordered by position.
        max_lines: Upper bound on the number of lines in a window.

    Returns:
        One QuestionWindow per QuestionStart, in document order.
    """
    windows: list[QuestionWindow] = []
    for i, boundary in enumerate(boundaries):
        if not isinstance(boundary, QuestionStart):
            continue
        end = boundaries[i + 1].position if i + 1 < len(boundaries) else len(lines)
        end = min(end, boundary.position + 1 + max_lines)
        windows.append(
            QuestionWindow(
                question=boundary,
                lines=tuple(lines[boundary.position + 1 : end]),
            )
        )
    return windows
