"""Pydantic schemas for parsed questionnaires.

These schemas are the output contract of the parsing pipeline and the
request/response bodies of the questionnaire API. JSON keys follow the
form builder's conventions: snake_case for structure, camelCase for
``allowsCustomInput`` and the metadata counters.
"""

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Locale, QuestionType


class LocalizedText(BaseModel):
    """A string in every supported locale (English, Albanian, Serbian)."""

    en: str = Field("", description="English text")
    sq: str = Field("", description="Albanian text")
    sr: str = Field("", description="Serbian text")

    @classmethod
    def replicate(cls, text: str) -> "LocalizedText":
        """Use the same text in every locale.

        The parser does not translate; source text is copied into each
        slot and translated downstream.
        """
        return cls(**{locale.value: text for locale in Locale})

    def get(self, locale: Locale | str) -> str:
        """Return the text for one locale."""
        return getattr(self, Locale(locale).value)


class OptionSchema(BaseModel):
    """An answer option of a choice question."""

    model_config = ConfigDict(populate_by_name=True)

    value: str = Field(..., description="Positional slug, e.g. 'option_1'")
    label: LocalizedText
    allows_custom_input: bool = Field(
        False,
        alias="allowsCustomInput",
        description="Option expects a written answer (e.g. 'Other, please specify')",
    )


class QuestionSchema(BaseModel):
    """A classified question.

    Attributes:
        id: Question number as written ("3.1"), or "q<k>" when unnumbered.
        question_text: Full question line, numbering retained.
        question_type: Rendered type.
        options: Options for choice types, None otherwise.
        help_text: Instruction for the respondent ("" when none).
        order_index: Position within the section, starting at 0.
        question_number: Detected number, None when unnumbered.
        required: Always False from the parser.
        validation_rules: Type-specific input constraints.
        confidence: Classifier confidence.
    """

    id: str
    question_text: LocalizedText
    question_type: QuestionType
    options: list[OptionSchema] | None = None
    help_text: LocalizedText = Field(default_factory=LocalizedText)
    order_index: int = Field(..., ge=0)
    question_number: str | None = None
    required: bool = False
    validation_rules: dict[str, Any] | None = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class SectionSchema(BaseModel):
    """A section of the questionnaire."""

    title: LocalizedText
    description: LocalizedText = Field(default_factory=LocalizedText)
    order_index: int = Field(..., ge=0)
    questions: list[QuestionSchema] = Field(default_factory=list)


class TreeMetadataSchema(BaseModel):
    """Summary counts for a parsed questionnaire."""

    model_config = ConfigDict(populate_by_name=True)

    total_questions: int = Field(0, ge=0, alias="totalQuestions")
    total_sections: int = Field(0, ge=0, alias="totalSections")
    total_options: int = Field(0, ge=0, alias="totalOptions")


class QuestionnaireTreeSchema(BaseModel):
    """Parsed questionnaire: ordered sections plus summary metadata."""

    sections: list[SectionSchema] = Field(default_factory=list)
    metadata: TreeMetadataSchema = Field(default_factory=TreeMetadataSchema)

    def iter_questions(self) -> Iterator[QuestionSchema]:
        """Yield every question in document order."""
        for section in self.sections:
            yield from section.questions


# ============================================================
# API REQUESTS / RESPONSES
# ============================================================


class ParseRequestSchema(BaseModel):
    """Extracted document to parse."""

    lines: list[str] = Field(..., description="Document text split into lines")
    html: str = Field("", description="HTML rendering of the same document")


class ClassifyRequestSchema(BaseModel):
    """A single question to classify."""

    question_text: str = Field(..., min_length=1)
    window: list[str] = Field(default_factory=list, description="Lines following the question")


class ClassificationSchema(BaseModel):
    """Classification result for a single question."""

    question_type: QuestionType
    candidate: str = Field(..., description="Winning scoring candidate, may be 'rating'")
    confidence: float = Field(..., ge=0.0, le=1.0)
    scores: dict[str, int]
    override: bool = False
    matched_rules: list[str] = Field(default_factory=list)
