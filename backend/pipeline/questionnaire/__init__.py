"""Questionnaire structural parsing and question-type classification."""

from pipeline.questionnaire.classifier import Classification, classify_question
from pipeline.questionnaire.emphasis import EmphasisIndex, build_emphasis_index
from pipeline.questionnaire.line_normalizer import RawLine, normalize_lines
from pipeline.questionnaire.parser import (
    ParserOptions,
    QuestionnaireParser,
    parse_questionnaire,
    parse_text,
)

__all__ = [
    "Classification",
    "EmphasisIndex",
    "ParserOptions",
    "QuestionnaireParser",
    "RawLine",
    "build_emphasis_index",
    "classify_question",
    "normalize_lines",
    "parse_questionnaire",
    "parse_text",
]
