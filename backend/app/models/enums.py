"""Enumerations shared by the pipeline and the API schemas."""

import enum


class QuestionType(str, enum.Enum):
    """Rendered type of a questionnaire question."""

    TEXT = "text"  # Single-line answer
    TEXTAREA = "textarea"  # Multi-line answer
    RADIO = "radio"  # Exactly one option
    CHECKBOX = "checkbox"  # Any number of options
    BOOLEAN = "boolean"  # Yes/no pair
    SELECT = "select"  # Exactly one option, rendered as a dropdown


class Locale(str, enum.Enum):
    """Locales every label is provided in."""

    EN = "en"  # English
    SQ = "sq"  # Albanian
    SR = "sr"  # Serbian


# Types whose answers come from an option list
CHOICE_QUESTION_TYPES = frozenset(
    {QuestionType.RADIO, QuestionType.CHECKBOX, QuestionType.BOOLEAN, QuestionType.SELECT}
)
