"""Pydantic schemas module.

This module contains Pydantic models used for:
- API request/response validation
- Data transfer between layers (pipeline, API)

Naming convention:
- Schema suffix on every model
- LocalizedText for strings carried in all three locales
"""

from app.models.enums import QuestionType
from app.schemas.questionnaire import (
    ClassificationSchema,
    ClassifyRequestSchema,
    LocalizedText,
    OptionSchema,
    ParseRequestSchema,
    QuestionnaireTreeSchema,
    QuestionSchema,
    SectionSchema,
    TreeMetadataSchema,
)

__all__ = [
    # Tree schemas
    "LocalizedText",
    "OptionSchema",
    "QuestionSchema",
    "QuestionType",
    "SectionSchema",
    "TreeMetadataSchema",
    "QuestionnaireTreeSchema",
    # API schemas
    "ParseRequestSchema",
    "ClassifyRequestSchema",
    "ClassificationSchema",
]
