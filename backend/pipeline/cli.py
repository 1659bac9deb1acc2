"""CLI for running the questionnaire parsing pipeline."""

import argparse
import json
import logging
import sys
from pathlib import Path

from app.models.enums import Locale
from app.schemas.questionnaire import QuestionnaireTreeSchema
from pipeline.questionnaire.classifier import classify_question
from pipeline.questionnaire.line_normalizer import normalize_lines, split_text
from pipeline.questionnaire.parser import ParserOptions, QuestionnaireParser

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)-5.5s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def read_input(path: Path) -> str | None:
    """Read a UTF-8 input file, logging an error if it is missing."""
    if not path.is_file():
        logger.error(f"Input file not found: {path}")
        return None
    return path.read_text(encoding="utf-8")


def print_summary(tree: QuestionnaireTreeSchema, locale: Locale = Locale.EN) -> None:
    """Print a per-section overview of a parsed questionnaire.

    Args:
        tree: The parsed questionnaire.
        locale: Which label slot to print.
    """
    metadata = tree.metadata
    print(
        f"\n{metadata.total_sections} sections, "
        f"{metadata.total_questions} questions, "
        f"{metadata.total_options} options"
    )
    for section in tree.sections:
        print(f"\n  [{section.order_index}] {section.title.get(locale)}")
        for question in section.questions:
            option_count = len(question.options or [])
            print(
                f"    {question.id:<10} {question.question_type.value:<9} "
                f"{option_count:>2} opts  {question.question_text.get(locale)[:60]}"
            )


def parse_command(
    input_path: Path,
    html_path: Path | None = None,
    output_path: Path | None = None,
    summary: bool = False,
    options: ParserOptions | None = None,
    locale: Locale = Locale.EN,
) -> int:
    """Parse an extracted text file into a questionnaire tree.

    Args:
        input_path: Plain-text extraction of the document.
        html_path: Optional HTML rendering of the same document.
        output_path: Write the JSON tree here instead of stdout.
        summary: Print a per-section summary instead of JSON.
        options: Parser limits.
        locale: Label slot used by the summary.

    Returns:
        0 on success, 1 on failure.
    """
    text = read_input(input_path)
    if text is None:
        return 1

    html = ""
    if html_path is not None:
        html = read_input(html_path)
        if html is None:
            return 1

    tree = QuestionnaireParser(options).parse_text(text, html)

    if summary:
        print_summary(tree, locale)
        return 0

    payload = json.dumps(tree.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
    if output_path is not None:
        output_path.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote questionnaire tree to {output_path}")
    else:
        print(payload)
    return 0


def normalize_command(input_path: Path) -> int:
    """Print the normalized lines of a text file with their source indices."""
    text = read_input(input_path)
    if text is None:
        return 1

    for line in normalize_lines(split_text(text)):
        print(f"{line.index:>5}  {line.text}")
    return 0


def classify_command(question_text: str, window: list[str]) -> int:
    """Classify a single question and print the scores."""
    result = classify_question(question_text, window)

    print(f"\nType:       {result.question_type.value}")
    print(f"Candidate:  {result.candidate.value}")
    print(f"Confidence: {result.confidence:.2f}")
    if result.override:
        print("Override:   free-response instruction")
    else:
        print(f"Rules:      {', '.join(result.matched_rules) or '-'}")
        for name, score in result.scores.as_dict().items():
            print(f"  {name:<9} {score}")
    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Questionnaire parsing pipeline CLI")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse an extracted questionnaire")
    parse_parser.add_argument(
        "file",
        type=Path,
        help="Plain-text extraction of the document",
    )
    parse_parser.add_argument(
        "--html",
        type=Path,
        help="HTML rendering of the document (used for emphasis)",
    )
    parse_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write JSON to this file instead of stdout",
    )
    parse_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a per-section summary instead of JSON",
    )
    parse_parser.add_argument(
        "--locale",
        type=Locale,
        choices=list(Locale),
        metavar="{en,sq,sr}",
        default=Locale.EN,
        help="Label locale for --summary (default: en)",
    )
    parse_parser.add_argument(
        "--window-size",
        type=int,
        default=20,
        help="Maximum lines in a question window (default: 20)",
    )
    parse_parser.add_argument(
        "--select-threshold",
        type=int,
        default=10,
        help="Options above which single-choice becomes select (default: 10)",
    )

    # Normalize command
    normalize_parser = subparsers.add_parser(
        "normalize", help="Print normalized lines of an extracted document"
    )
    normalize_parser.add_argument(
        "file",
        type=Path,
        help="Plain-text extraction of the document",
    )

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Classify a single question")
    classify_parser.add_argument(
        "question",
        help="Question text, numbering included",
    )
    classify_parser.add_argument(
        "--line",
        action="append",
        default=[],
        dest="lines",
        help="A window line following the question (repeatable)",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "parse":
        return parse_command(
            input_path=args.file,
            html_path=args.html,
            output_path=args.output,
            summary=args.summary,
            locale=args.locale,
            options=ParserOptions(
                window_size=args.window_size,
                select_threshold=args.select_threshold,
            ),
        )

    elif args.command == "normalize":
        return normalize_command(args.file)

    elif args.command == "classify":
        return classify_command(args.question, args.lines)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
