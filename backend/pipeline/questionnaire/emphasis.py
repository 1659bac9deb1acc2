"""Emphasis index built from the HTML rendering of a survey document.

The HTML converter (e.g. mammoth for .docx) keeps inline formatting that
the plain-text extraction loses. Authors put instructions for respondents
in italics ("Please choose one of the following") and headings in bold, so
the parser uses the emphasized spans as a fallback source of help text and
the bold spans as a hint for section headings.

Spans are recorded in document order together with the ordinal of the
block (paragraph, list item, cell) that contains them. They are correlated
with text lines by proximity only, never by exact line position.
"""

import logging
from dataclasses import dataclass

from lxml import etree, html

from pipeline.questionnaire.line_normalizer import clean_text
from pipeline.questionnaire.patterns import (
    ANY_NUMBERED,
    is_option_marked,
    is_question_number,
)

logger = logging.getLogger(__name__)

EMPHASIS = "emphasis"
STRONG = "strong"

EMPHASIS_TAGS = ("em", "i")
STRONG_TAGS = ("strong", "b")

BLOCK_TAGS = frozenset(
    {"p", "li", "h1", "h2", "h3", "h4", "h5", "h6", "td", "th", "caption", "blockquote", "div"}
)

# Number of leading characters used to find a question inside the HTML
LOCATE_PREFIX_LENGTH = 30

# Emphasized text this long is body copy, not an instruction
MAX_HELP_TEXT_LENGTH = 200


@dataclass(frozen=True)
class HtmlBlock:
    """A leaf block element (paragraph, list item, cell) of the HTML."""

    index: int
    text: str


@dataclass(frozen=True)
class EmphasisSpan:
    """An emphasized region of the HTML rendering.

    Attributes:
        text: Cleaned text content of the span.
        block: Ordinal of the block containing the span.
        kind: "emphasis" for <em>/<i>, "strong" for <strong>/<b>.
    """

    text: str
    block: int
    kind: str


@dataclass(frozen=True)
class EmphasisIndex:
    """Ordered blocks and emphasized spans of one document."""

    blocks: tuple[HtmlBlock, ...] = ()
    spans: tuple[EmphasisSpan, ...] = ()

    @property
    def emphasized(self) -> tuple[EmphasisSpan, ...]:
        """Return the italic spans in document order."""
        return tuple(span for span in self.spans if span.kind == EMPHASIS)

    @property
    def strong_texts(self) -> frozenset[str]:
        """Return the distinct texts of bold spans."""
        return frozenset(span.text for span in self.spans if span.kind == STRONG)

    @property
    def is_empty(self) -> bool:
        """Return True if the HTML yielded no blocks."""
        return not self.blocks

    def locate(self, text: str) -> int | None:
        """Return the ordinal of the first block containing ``text``.

        Only the first 30 characters of the cleaned text are compared, since
        the HTML block may wrap or continue past the extracted line.
        """
        key = clean_text(text)[:LOCATE_PREFIX_LENGTH]
        if not key:
            return None
        for block in self.blocks:
            if key in block.text:
                return block.index
        return None

    def emphasis_after(self, text: str, max_blocks: int = 2) -> str:
        """Return the italic span nearest after the block containing ``text``.

        The search covers the anchor block and up to ``max_blocks`` following
        blocks. It stops at a block that opens with an option marker or a
        question number, since emphasis past that point belongs to the
        options or to the next question.
        """
        anchor = self.locate(text)
        if anchor is None:
            return ""

        question = clean_text(text)
        for block in self.blocks[anchor : anchor + max_blocks + 1]:
            if block.index > anchor and (
                is_option_marked(block.text) or is_question_number(block.text)
            ):
                break
            for span in self.spans:
                if span.block != block.index or span.kind != EMPHASIS:
                    continue
                if _is_help_candidate(span.text, question):
                    return span.text
        return ""


def _is_help_candidate(candidate: str, question: str) -> bool:
    """Check whether an italic span can serve as help text for a question."""
    if not candidate or candidate in question:
        return False
    if len(candidate) >= MAX_HELP_TEXT_LENGTH:
        return False
    return not (is_option_marked(candidate) or ANY_NUMBERED.match(candidate))


def _is_leaf_block(element: etree._Element) -> bool:
    if element.tag not in BLOCK_TAGS:
        return False
    return not any(child.tag in BLOCK_TAGS for child in element.iterdescendants())


def build_emphasis_index(document_html: str) -> EmphasisIndex:
    """Build the emphasis index for an HTML rendering.

    Args:
        document_html: HTML fragment or document. May be empty.

    Returns:
        EmphasisIndex. Empty when the HTML is blank or cannot be parsed.
    """
    if not document_html or not document_html.strip():
        return EmphasisIndex()

    try:
        root = html.fromstring(document_html)
    except (etree.LxmlError, ValueError) as e:
        logger.warning(f"Could not parse document HTML, emphasis index is empty: {e}")
        return EmphasisIndex()

    leaves = [el for el in root.iter() if _is_leaf_block(el)]
    if not leaves:
        leaves = [root]

    blocks: list[HtmlBlock] = []
    spans: list[EmphasisSpan] = []
    for element in leaves:
        block_index = len(blocks)
        blocks.append(HtmlBlock(index=block_index, text=clean_text(element.text_content())))
        for inline in element.iter(*EMPHASIS_TAGS, *STRONG_TAGS):
            span_text = clean_text(inline.text_content())
            if not span_text:
                continue
            kind = EMPHASIS if inline.tag in EMPHASIS_TAGS else STRONG
            spans.append(EmphasisSpan(text=span_text, block=block_index, kind=kind))

    logger.debug(f"Emphasis index: {len(blocks)} blocks, {len(spans)} spans")
    return EmphasisIndex(blocks=tuple(blocks), spans=tuple(spans))
