"""Tree assembly: sections, questions and options into the output schema.

Questions are grouped under the most recent section heading. Questions
that come before the first heading (or every question, in a document
without headings) go to an implicit "General Questions" section.
Subsection headings do not open a section; their titles are appended to
the enclosing section's description, "(n/N)" counter included.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from app.models.enums import CHOICE_QUESTION_TYPES, QuestionType
from app.schemas.questionnaire import (
    LocalizedText,
    OptionSchema,
    QuestionnaireTreeSchema,
    QuestionSchema,
    SectionSchema,
    TreeMetadataSchema,
)
from pipeline.questionnaire.boundaries import (
    Boundary,
    QuestionStart,
    SectionHeading,
    SubsectionHeading,
)
from pipeline.questionnaire.classifier import Candidate, Classification
from pipeline.questionnaire.option_extractor import ExtractedOption
from pipeline.questionnaire.patterns import EMAIL_VOCABULARY, WORD_LIMIT

logger = logging.getLogger(__name__)

GENERAL_SECTION_TITLE = LocalizedText(
    en="General Questions",
    sq="Pyetje të Përgjithshme",
    sr="Општа питања",
)

TEXT_MAX_LENGTH = 500
TEXTAREA_MAX_LENGTH = 5000
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


@dataclass(frozen=True)
class ResolvedQuestion:
    """A question with its classification, options and help text."""

    start: QuestionStart
    classification: Classification
    options: tuple[ExtractedOption, ...] = ()
    help_text: str = ""


@dataclass
class _SectionBuilder:
    title: LocalizedText
    implicit: bool = False
    subsections: list[str] = field(default_factory=list)
    questions: list[QuestionSchema] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.questions and not self.subsections


def final_question_type(question: ResolvedQuestion, select_threshold: int = 10) -> QuestionType:
    """Return the rendered type, promoting long single-choice lists to select."""
    classification = question.classification
    single_choice = classification.candidate in (Candidate.RADIO, Candidate.RATING)
    if single_choice and len(question.options) > select_threshold:
        return QuestionType.SELECT
    return classification.question_type


def validation_rules_for(question_type: QuestionType, question_text: str) -> dict | None:
    """Build the input constraints for free-text questions.

    Args:
        question_type: Final question type.
        question_text: Question line, scanned for e-mail and word limits.

    Returns:
        Rules dict for text/textarea questions, None for choice types.
    """
    if question_type == QuestionType.TEXT:
        rules: dict = {"maxLength": TEXT_MAX_LENGTH}
        if EMAIL_VOCABULARY.search(question_text):
            rules["pattern"] = EMAIL_PATTERN
        return rules
    if question_type == QuestionType.TEXTAREA:
        rules = {"maxLength": TEXTAREA_MAX_LENGTH}
        word_limit = WORD_LIMIT.search(question_text)
        if word_limit:
            rules["maxWords"] = int(word_limit.group(1))
        return rules
    return None


def _option_schemas(options: Sequence[ExtractedOption]) -> list[OptionSchema]:
    return [
        OptionSchema(
            value=option.value,
            label=LocalizedText.replicate(option.label),
            allows_custom_input=option.allows_custom_input,
        )
        for option in options
    ]


def _question_id(question: ResolvedQuestion, ordinal: int, seen: dict[str, int]) -> str:
    base = question.start.number or f"q{ordinal}"
    seen[base] = seen.get(base, 0) + 1
    if seen[base] == 1:
        return base
    return f"{base}-{seen[base]}"


def build_question_schema(
    question: ResolvedQuestion,
    question_id: str,
    order_index: int,
    select_threshold: int = 10,
) -> QuestionSchema:
    """Convert a resolved question into its output schema."""
    question_type = final_question_type(question, select_threshold)
    options = None
    if question_type in CHOICE_QUESTION_TYPES and question.options:
        options = _option_schemas(question.options)

    return QuestionSchema(
        id=question_id,
        question_text=LocalizedText.replicate(question.start.raw_text),
        question_type=question_type,
        options=options,
        help_text=LocalizedText.replicate(question.help_text),
        order_index=order_index,
        question_number=question.start.number,
        required=False,
        validation_rules=validation_rules_for(question_type, question.start.raw_text),
        confidence=question.classification.confidence,
    )


def assemble_tree(
    boundaries: Sequence[Boundary],
    questions: Sequence[ResolvedQuestion],
    select_threshold: int = 10,
) -> QuestionnaireTreeSchema:
    """Compose the questionnaire tree.

    Args:
        boundaries: Boundaries ordered by position.
        questions: One resolved question per QuestionStart, in order.
        select_threshold: Single-choice questions with more options than
            this are rendered as select.

    Returns:
        QuestionnaireTreeSchema with sections in document order.
    """
    by_position = {question.start.position: question for question in questions}
    builders = [_SectionBuilder(title=GENERAL_SECTION_TITLE, implicit=True)]
    seen_ids: dict[str, int] = {}
    ordinal = 0

    for boundary in boundaries:
        current = builders[-1]
        if isinstance(boundary, SectionHeading):
            builders.append(_SectionBuilder(title=LocalizedText.replicate(boundary.title)))
        elif isinstance(boundary, SubsectionHeading):
            current.subsections.append(boundary.title)
        elif boundary.position in by_position:
            question = by_position[boundary.position]
            ordinal += 1
            current.questions.append(
                build_question_schema(
                    question,
                    question_id=_question_id(question, ordinal, seen_ids),
                    order_index=len(current.questions),
                    select_threshold=select_threshold,
                )
            )

    # Without declared headings the implicit section is the whole document
    declared = len(builders) > 1
    kept = [b for b in builders if not (b.implicit and b.is_empty and declared)]
    sections = [
        SectionSchema(
            title=builder.title,
            description=LocalizedText.replicate("\n".join(builder.subsections)),
            order_index=order_index,
            questions=builder.questions,
        )
        for order_index, builder in enumerate(kept)
    ]

    metadata = TreeMetadataSchema(
        total_questions=sum(len(s.questions) for s in sections),
        total_sections=len(sections),
        total_options=sum(
            len(q.options or []) for s in sections for q in s.questions
        ),
    )
    logger.debug(
        f"Assembled {metadata.total_sections} sections, "
        f"{metadata.total_questions} questions, {metadata.total_options} options"
    )
    return QuestionnaireTreeSchema(sections=sections, metadata=metadata)
