"""Questionnaire endpoints: parse extracted documents, classify questions."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.config import settings
from app.schemas.questionnaire import (
    ClassificationSchema,
    ClassifyRequestSchema,
    ParseRequestSchema,
    QuestionnaireTreeSchema,
)
from pipeline.questionnaire.classifier import classify_question
from pipeline.questionnaire.parser import ParserOptions, QuestionnaireParser

logger = logging.getLogger(__name__)

router = APIRouter()


def get_parser() -> QuestionnaireParser:
    """Build a parser configured from the application settings."""
    return QuestionnaireParser(
        ParserOptions(
            window_size=settings.parser_window_size,
            help_text_min_length=settings.parser_help_text_min_length,
            select_threshold=settings.parser_select_threshold,
            lookahead=settings.parser_lookahead,
        )
    )


@router.post("/parse", response_model=QuestionnaireTreeSchema)
async def parse_document(
    request: ParseRequestSchema,
    parser: QuestionnaireParser = Depends(get_parser),
) -> QuestionnaireTreeSchema:
    """Parse an extracted document into sections, questions and options."""
    if len(request.lines) > settings.max_document_lines:
        raise HTTPException(
            status_code=413,
            detail=(
                f"Document has {len(request.lines)} lines, "
                f"limit is {settings.max_document_lines}"
            ),
        )
    return parser.parse(request.lines, request.html)


@router.post("/classify", response_model=ClassificationSchema)
async def classify(request: ClassifyRequestSchema) -> ClassificationSchema:
    """Classify a single question from its text and the lines that follow it."""
    result = classify_question(request.question_text, request.window)
    logger.debug(f"Classified {request.question_text[:40]!r} as {result.question_type.value}")
    return ClassificationSchema(
        question_type=result.question_type,
        candidate=result.candidate.value,
        confidence=result.confidence,
        scores=result.scores.as_dict(),
        override=result.override,
        matched_rules=list(result.matched_rules),
    )
