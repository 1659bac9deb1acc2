"""Line normalization for extracted questionnaire text.

Text extracted from Word/PDF survey documents carries scanning artifacts:
page and line counters glued onto the next word ("dhënave 118Të") or left
floating between words ("pyetje 42 tjetër"), repeated whitespace and
zero-width characters. This module cleans each raw line so the later
stages can match numbering and marker patterns reliably.

Normalization is idempotent: cleaning an already-clean line is a no-op.
"""

import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass

from pipeline.questionnaire.patterns import TRAILING_LINE_NUMBER, UPPER_LETTERS

ZERO_WIDTH_CHARS = re.compile("[\u200b-\u200d\ufeff]")

# "word 118Text" -> counter glued to the start of a capitalised word
GLUED_LINE_NUMBER = re.compile(rf"(?<=\S)\s+\d{{2,4}}(?=[{UPPER_LETTERS}])")

# "word 42 word" -> counter floating between words
STANDALONE_LINE_NUMBER = re.compile(r"(?<=\s)\d{2,4}(?=\s)")

WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class RawLine:
    """A cleaned, non-empty line of the source document.

    Attributes:
        index: 0-based position of the line in the original extraction.
        text: The cleaned line text.
    """

    index: int
    text: str


def clean_text(text: str) -> str:
    """Clean a single line of extracted text.

    Steps, in order:
    1. Unicode NFC normalization and removal of zero-width characters.
    2. A 2-4 digit counter glued to the next capitalised word is replaced
       by a single space ("dhënave 118Të" -> "dhënave Të").
    3. A 2-4 digit counter surrounded by whitespace is dropped.
    4. Whitespace runs collapse to one space; the result is trimmed.
    """
    if not text:
        return ""

    cleaned = unicodedata.normalize("NFC", text)
    cleaned = ZERO_WIDTH_CHARS.sub("", cleaned)
    cleaned = GLUED_LINE_NUMBER.sub(" ", cleaned)
    cleaned = STANDALONE_LINE_NUMBER.sub("", cleaned)
    cleaned = WHITESPACE_RUN.sub(" ", cleaned)
    return cleaned.strip()


def strip_trailing_line_number(text: str) -> str:
    """Remove a trailing line counter from a title ("Title 91" -> "Title").

    A leading number ("3. Title") and a "(n/N)" series suffix are preserved.
    """
    return TRAILING_LINE_NUMBER.sub("", text).strip()


def normalize_lines(lines: Iterable[str]) -> list[RawLine]:
    """Clean raw extracted lines, dropping lines that end up empty.

    Args:
        lines: Document text split into lines, in original order.

    Returns:
        List of RawLine objects. Each keeps the index of its source line;
        indices of dropped lines are not reused.
    """
    normalized: list[RawLine] = []
    for index, line in enumerate(lines):
        text = clean_text(line)
        if text:
            normalized.append(RawLine(index=index, text=text))
    return normalized


def split_text(text: str) -> list[str]:
    """Split extracted document text into raw lines."""
    return text.splitlines()
