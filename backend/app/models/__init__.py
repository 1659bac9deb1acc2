"""Domain enumerations for the questionnaire import service."""

from app.models.enums import CHOICE_QUESTION_TYPES, Locale, QuestionType

__all__ = [
    "CHOICE_QUESTION_TYPES",
    "Locale",
    "QuestionType",
]
