"""Lexical and marker patterns for questionnaire parsing.

Survey documents arrive in English, Albanian and Serbian (Latin and
Cyrillic script), written without a fixed template. This module collects
every regex the parser relies on in one place so the stages (boundary
detection, classification, option extraction, help text) agree on what a
"marker", a "yes/no token" or a "free-response prompt" looks like.

Pattern Categories:
- Numbering: hierarchical question numbers, simple numbered items, headings
- Markers: option line prefixes (parenthesis, bracket, letter, digit, bullet)
- Vocabulary: locale-spanning phrase families used as classification signals
- Layout: separators, blank-fill markers, scale indicators
"""

import enum
import re
from dataclasses import dataclass

# Upper-case letters that can open a heading or glue onto a line counter.
# Covers Latin-1, the Albanian/Serbian Latin extras and Serbian Cyrillic.
UPPER_LETTERS = "A-ZÀ-ÖØ-ÞČĆĐŠŽĚŁŃŘŚŤŮŽА-ЯЂЈЉЊЋЏ"

# ============================================================
# NUMBERING PATTERNS
# ============================================================

# "1.1.2.a Text" - the letter is a sibling item, not a numbering level
HIERARCHICAL_LETTER_NUMBER = re.compile(
    r"^(?P<number>(?:\d+\.)+\d+\.[A-Za-z])[.)]?\s+\S"
)

# "3.1 Text", "1.2.1 Text" and the "3.1. Text" variant
HIERARCHICAL_NUMBER = re.compile(r"^(?P<number>(?:\d+\.)+\d+)\.?\s+\S")

# "7. text" - exactly one numeric segment
SIMPLE_NUMBER = re.compile(r"^(?P<number>\d+)\.\s+\S")

# "3. Title" - candidate top-level heading (one or two digits, capitalised word)
NUMBERED_HEADING = re.compile(rf"^(?P<number>\d{{1,2}})\.\s+[{UPPER_LETTERS}]")

# Any line opening with a number followed by a period ("3.", "3.1", "3.1.a")
ANY_NUMBERED = re.compile(r"^\d+\.")

# "Q4. Text", "Question 4: Text", "Pyetja 4: Text", "Pitanje 4. Text"
PREFIXED_NUMBER = re.compile(
    r"^(?:Q|Question|Pyetja|Pitanje|Питање)\s*(?P<number>\d+(?:\.\d+)*)\s*[.:)]\s+\S",
    re.IGNORECASE,
)

# Comment-style section markers: "# Title", "## Title", "// Title",
# "/* Title */", "-- Title", "; Title"
COMMENT_HEADING = re.compile(
    r"^(?P<prefix>#{1,6}|//|/\*|--|;)\s*(?P<title>[^-\s].*?)\s*(?:\*/)?$"
)

# "Section 2:", "Part B.", "Chapter IV -", "Pjesa 1:", "Odeljak 3:"
NAMED_HEADING = re.compile(
    r"^(?:Section|Part|Chapter|Seksioni|Pjesa|Kapitulli|Odeljak|Deo|Poglavlje|"
    r"Одељак|Део|Поглавље)\s+[A-Z0-9]+\s*[:.\-–]",
    re.IGNORECASE,
)

# "(3/12)" series counter marking a subsection
SERIES_COUNTER = re.compile(r"\((?P<position>\d+)\s*/\s*(?P<total>\d+)\)")

# Trailing page/line counter glued to the end of a title: "Title 91"
TRAILING_LINE_NUMBER = re.compile(r"\s+\d{2,4}$")

# ============================================================
# OPTION MARKERS
# ============================================================


class MarkerType(enum.StrEnum):
    """Kind of leading glyph that marks an option line."""

    PARENTHESIS = "parenthesis"
    BRACKET = "bracket"
    LETTER = "letter"
    DIGIT = "digit"
    BULLET = "bullet"


@dataclass
class OptionMarker:
    """Definition of an option marker with its regex.

    The regex must capture the option label (text after the marker) in a
    group named ``label``.
    """

    name: str
    marker_type: MarkerType
    regex: re.Pattern

    def match(self, line: str) -> str | None:
        """Return the label text when ``line`` opens with this marker."""
        m = self.regex.match(line)
        if not m:
            return None
        label = m.group("label").strip()
        return label or None


# Order matters: the first marker that matches wins.
OPTION_MARKERS: list[OptionMarker] = [
    # ( ) Option, (x) Option, ○ Option
    OptionMarker(
        name="parenthesis",
        marker_type=MarkerType.PARENTHESIS,
        regex=re.compile(r"^(?:\(\s*[xX✓✔]?\s*\)|[○◯⚪◦])\s*(?P<label>\S.*)$"),
    ),
    # [ ] Option, [x] Option, ☐ Option
    OptionMarker(
        name="bracket",
        marker_type=MarkerType.BRACKET,
        regex=re.compile(r"^(?:\[\s*[xX✓✔]?\s*\]|[☐☑☒▢□])\s*(?P<label>\S.*)$"),
    ),
    # a) Option
    OptionMarker(
        name="letter",
        marker_type=MarkerType.LETTER,
        regex=re.compile(r"^[a-z]\)\s+(?P<label>\S.*)$"),
    ),
    # 1) Option
    OptionMarker(
        name="digit",
        marker_type=MarkerType.DIGIT,
        regex=re.compile(r"^\d{1,2}\)\s+(?P<label>\S.*)$"),
    ),
    # • Option, ● Option, * Option, - Option
    OptionMarker(
        name="bullet",
        marker_type=MarkerType.BULLET,
        regex=re.compile(r"^[•●▪■◆➤►\*\-–]\s+(?P<label>\S.*)$"),
    ),
]

# An empty marker followed by a number, possibly repeated: "( ) 1 ( ) 2 ( ) 3"
SCALE_MARKER = re.compile(r"[\(\[]\s*[xX]?\s*[\)\]]\s*\d+")

# Splits an inline scale line on its markers
INLINE_MARKER = re.compile(r"[\(\[]\s*[xX]?\s*[\)\]]")

# A whole line wrapped in parentheses, optionally followed by a line counter.
# Excludes empty/checked option markers such as "( ) Po" or "(x) Po (shënim)".
PARENTHETICAL_LINE = re.compile(r"^\((?!\s*[xX✓✔]?\s*\))(?P<content>.+)\)\s*\d*$")

# "-----", "_____", "=====", "*****"
SEPARATOR_LINE = re.compile(r"^(?:-{3,}|_{3,}|={3,}|\*{3,})$")

# Document furniture that is never a question: intros, thanks, titles.
# "Introduction", "Thank you for...", "Faleminderit", "Pyetësor për...", "Hvala"
META_LINE = re.compile(
    r"^(?:introduction|thank\s+you|questionnaire|survey|the\s+ultimate|"
    r"hyrje|faleminderit|pyetësor|anketa|uvod|hvala|упитник|анкета|увод|хвала)",
    re.IGNORECASE,
)

# Blank-fill area for a written answer: "________" or "......."
BLANK_FILL = re.compile(r"_{3,}|\.{4,}")

# Range inside question text or window: "1 to 5", "1-10", "1 deri 5", "1 do 5"
NUMERIC_RANGE = re.compile(
    r"\b(?P<low>\d{1,2})\s*(?:to|through|-|–|deri(?:\s+në)?|do|до)\s*(?P<high>\d{1,2})\b",
    re.IGNORECASE,
)

# ============================================================
# VOCABULARY (EN / SQ / SR)
# ============================================================

# Yes/no answer token with an optional leading marker: "( ) Po", "Jo", "[ ] Да"
YES_NO_LINE = re.compile(
    r"^(?:[\(\[]\s*[xX]?\s*[\)\]]|[•●\*\-–○☐])?\s*(?:yes|no|po|jo|da|ne|да|не)\.?$",
    re.IGNORECASE,
)

# Strong instruction that the answer is free text
FREE_RESPONSE_PHRASE = re.compile(
    r"please\s+(?:write|describe)\s+your\s+answer|write\s+your\s+answer"
    r"|(?:write|describe)\b.{0,40}\bhere\b|leave\b.{0,30}\bcomment"
    r"|ju\s+lutem\b.{0,20}\bshkruani|përgjigjen\s+tuaj\s+këtu|pergjigjen\s+tuaj\s+ketu"
    r"|lini\b.{0,30}\bkoment"
    r"|napišite|napisite|напишите|ostavite\b.{0,30}\bkomentar|оставите\b.{0,30}\bкоментар",
    re.IGNORECASE,
)

# Free-response prompt used as a stop line inside an option list
FREE_RESPONSE_PROMPT = re.compile(
    r"^(?:ju\s+lutem\s+shkruani|lini\b.{0,30}\bkoment|përgjigjen\s+tuaj|pergjigjen\s+tuaj"
    r"|napišite|napisite|напишите|please\s+write|write\s+your\s+answer)",
    re.IGNORECASE,
)

SELECT_ALL_PHRASE = re.compile(
    r"select\s+all|check\s+all|mark\s+all|choose\s+all|all\s+that\s+apply|more\s+than\s+one"
    r"|multiple\s+answers|up\s+to\s+\d+"
    r"|zgjidhni\s+t[eë]\s+gjitha|t[eë]\s+gjitha\s+q[eë]|m[eë]\s+shum[eë]\s+se\s+nj[eë]"
    r"|shum[eë]fish"
    r"|izaberite\s+sve|odaberite\s+sve|ozna[čc]ite\s+sve|vi[šs]e\s+odgovora"
    r"|изаберите\s+све|означите\s+све|више\s+одговора",
    re.IGNORECASE,
)

SELECT_ONE_PHRASE = re.compile(
    r"select\s+one|choose\s+one|pick\s+one|only\s+one|single\s+choice"
    r"|zgjidhni\s+vet[eë]m\s+nj[eë]|zgjidh\s+nj[eë]|vet[eë]m\s+nj[eë]"
    r"|izaberite\s+jedan|odaberite\s+jedan|samo\s+jedan|samo\s+jedno"
    r"|изаберите\s+један|само\s+један|само\s+једно",
    re.IGNORECASE,
)

RATING_VOCABULARY = re.compile(
    r"satisf|agree|disagree|rate\b|rating|scale|likert|how\s+likely"
    r"|k[eë]naq|pajtohe|vler[eë]so|shkall"
    r"|zadovolj|sla[žz]e|ocen|skal"
    r"|задовољ|слаже|оцен|скал",
    re.IGNORECASE,
)

FREE_TEXT_VOCABULARY = re.compile(
    r"\b(?:describe|explain|elaborate|opinion|feedback|comments?|suggestions?|thoughts"
    r"|p[eë]rshkruani|shpjegoni|sqaroni|mendim\w*|koment\w*|sugjerim\w*"
    r"|opi[šs]ite|objasnite|mi[šs]ljenj\w*|sugestij\w*"
    r"|опишите|објасните|мишљењ\w*|коментар\w*)\b",
    re.IGNORECASE,
)

WHY_VOCABULARY = re.compile(r"\b(?:why|pse|za[šs]to|зашто)\b", re.IGNORECASE)

SHORT_ANSWER_VOCABULARY = re.compile(
    r"\b(?:your\s+name|full\s+name|e-?mail|phone|telephone|age|what\s+is\s+your"
    r"|enter\s+your|emri|mbiemri|mosha|telefoni|ime\s+i\s+prezime|godine|телефон)\b",
    re.IGNORECASE,
)

# "Other" answer token
OTHER_TOKEN = re.compile(
    r"\b(?:other|others|tjet[eë]r|tjetra|drugo|ostalo|друго|остало)\b", re.IGNORECASE
)

# Co-signal that an "other" option expects written input
SPECIFY_SIGNAL = re.compile(
    r"specify|specifikoni|specifiko|p[eë]rcaktoni|navedite|наведите|please\s+write"
    r"|write\s+in|shkruani|napi[šs]ite|напишите|:",
    re.IGNORECASE,
)

# "Maximum 200 words"
WORD_LIMIT = re.compile(r"(\d+)\s*(?:words|fjal[eë]|re[čc]i|речи)", re.IGNORECASE)

EMAIL_VOCABULARY = re.compile(r"\be-?mail\b", re.IGNORECASE)


def match_option_marker(line: str) -> tuple[OptionMarker, str] | None:
    """Return the first option marker matching ``line`` and its label."""
    for marker in OPTION_MARKERS:
        label = marker.match(line)
        if label is not None:
            return marker, label
    return None


def is_option_marked(line: str) -> bool:
    """Return True if the line opens with any option marker."""
    return match_option_marker(line.strip()) is not None


def is_yes_no(line: str) -> bool:
    """Return True if the line is a yes/no token (with or without a marker)."""
    return bool(YES_NO_LINE.match(line.strip()))


def is_option_like(line: str) -> bool:
    """Return True if the line looks like an answer option."""
    return is_option_marked(line) or is_yes_no(line)


def is_scale_line(line: str) -> bool:
    """Return True for scale indicators such as "( ) 1 ( ) 2 ( ) 3"."""
    return bool(SCALE_MARKER.search(line))


def is_question_number(line: str) -> bool:
    """Return True if the line opens with a hierarchical question number."""
    stripped = line.strip()
    return bool(
        HIERARCHICAL_LETTER_NUMBER.match(stripped) or HIERARCHICAL_NUMBER.match(stripped)
    )


def starts_numbered_item(line: str) -> bool:
    """Return True if the line opens with any question numbering.

    Covers hierarchical ("3.1"), simple ("7. text") and prefixed
    ("Q4.", "Pyetja 4:") numbers.
    """
    stripped = line.strip()
    return bool(
        is_question_number(stripped)
        or SIMPLE_NUMBER.match(stripped)
        or PREFIXED_NUMBER.match(stripped)
    )


def is_meta_line(line: str) -> bool:
    """Return True for unnumbered intro, thank-you and title lines."""
    stripped = line.strip()
    return bool(META_LINE.match(stripped)) and not ANY_NUMBERED.match(stripped)
