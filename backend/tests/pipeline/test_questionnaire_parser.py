"""End-to-end tests for the questionnaire parser."""

import pytest

from app.models.enums import QuestionType
from app.schemas.questionnaire import QuestionnaireTreeSchema, QuestionSchema
from pipeline.questionnaire import ParserOptions, QuestionnaireParser, parse_questionnaire
from pipeline.questionnaire.parser import parse_text

MUNICIPALITIES = [
    "Prishtinë",
    "Prizren",
    "Pejë",
    "Gjakovë",
    "Mitrovicë",
    "Ferizaj",
    "Gjilan",
    "Vushtrri",
    "Podujevë",
    "Rahovec",
    "Fushë Kosovë",
    "Suharekë",
]

DOCUMENT = [
    "1. Të dhënat e organizatës",
    "1.1 Emri i organizatës",
    "________________",
    "1.2 A është organizata juaj e regjistruar?",
    "( ) Po",
    "( ) Jo",
    "1.3 Cilat shërbime ofroni? (zgjidhni të gjitha që aplikohen)",
    "[ ] Trajnime",
    "[ ] Këshillim",
    "[ ] Financim",
    "[ ] Tjetër, specifikoni:",
    "",
    "2. Mbledhja e të dhënave 91",
    "Kampioni (1/2)",
    "2.1 Sa të kënaqur jeni me shërbimet?",
    "(Zgjidhni vetëm një përgjigje)",
    "( ) Shumë të kënaqur",
    "( ) Të kënaqur",
    "( ) Të pakënaqur",
    "2.2 Ju lutem shkruani përgjigjen tuaj këtu",
    "( ) Po",
    "2.3 Në cilën komunë veproni?",
    *[f"{letter}) {name}" for letter, name in zip("abcdefghijkl", MUNICIPALITIES)],
]

DOCUMENT_HTML = """
<p>1.1 Emri i organizatës</p>
<p><em>Emri i plotë zyrtar</em></p>
"""


@pytest.fixture
def tree() -> QuestionnaireTreeSchema:
    return parse_questionnaire(DOCUMENT, DOCUMENT_HTML)


def _question(tree: QuestionnaireTreeSchema, question_id: str) -> QuestionSchema:
    return next(q for q in tree.iter_questions() if q.id == question_id)


class TestDocumentStructure:
    """Tests for the overall tree."""

    def test_sections(self, tree: QuestionnaireTreeSchema) -> None:
        """Numbered headings become sections with their number kept."""
        assert [s.title.en for s in tree.sections] == [
            "1. Të dhënat e organizatës",
            "2. Mbledhja e të dhënave",
        ]

    def test_subsection_in_description(self, tree: QuestionnaireTreeSchema) -> None:
        """The series subsection is recorded on its section."""
        assert tree.sections[1].description.en == "Kampioni (1/2)"

    def test_question_order(self, tree: QuestionnaireTreeSchema) -> None:
        """Questions keep document order and their numbers."""
        assert [q.id for q in tree.sections[0].questions] == ["1.1", "1.2", "1.3"]
        assert [q.id for q in tree.sections[1].questions] == ["2.1", "2.2", "2.3"]

    def test_numbering_retained_in_text(self, tree: QuestionnaireTreeSchema) -> None:
        """Question text keeps its number verbatim."""
        assert _question(tree, "1.1").question_text.en == "1.1 Emri i organizatës"

    def test_metadata(self, tree: QuestionnaireTreeSchema) -> None:
        """Totals match the tree."""
        assert tree.metadata.total_sections == 2
        assert tree.metadata.total_questions == 6
        assert tree.metadata.total_options == 21


class TestQuestionTypes:
    """Tests for per-question results."""

    def test_blank_fill_is_text(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "1.1")
        assert question.question_type == QuestionType.TEXT
        assert question.options is None
        assert question.validation_rules == {"maxLength": 500}

    def test_boolean(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "1.2")
        assert question.question_type == QuestionType.BOOLEAN
        assert [o.label.sr for o in question.options] == ["Po", "Jo"]

    def test_checkbox_with_other(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "1.3")
        assert question.question_type == QuestionType.CHECKBOX
        assert [o.value for o in question.options] == [
            "option_1",
            "option_2",
            "option_3",
            "option_4",
        ]
        assert question.options[-1].allows_custom_input

    def test_radio_with_help_text(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "2.1")
        assert question.question_type == QuestionType.RADIO
        assert len(question.options) == 3
        assert question.help_text.en == "Zgjidhni vetëm një përgjigje"

    def test_free_response_override(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "2.2")
        assert question.question_type == QuestionType.TEXTAREA
        assert question.options is None
        assert question.validation_rules == {"maxLength": 5000}

    def test_long_list_becomes_select(self, tree: QuestionnaireTreeSchema) -> None:
        question = _question(tree, "2.3")
        assert question.question_type == QuestionType.SELECT
        assert [o.label.en for o in question.options] == MUNICIPALITIES

    def test_emphasis_help_text(self, tree: QuestionnaireTreeSchema) -> None:
        """Italic text after the question is used as help text."""
        assert _question(tree, "1.1").help_text.en == "Emri i plotë zyrtar"

    def test_required_defaults_false(self, tree: QuestionnaireTreeSchema) -> None:
        assert not any(q.required for q in tree.iter_questions())


class TestDocumentVariants:
    """Tests for documents without hierarchical numbering."""

    def test_flat_document(self) -> None:
        """Flat numbering is resolved by looking for options."""
        lines = [
            "1. Gender",
            "( ) Male",
            "( ) Female",
            "2. Comments",
            "3. rate our service from 1 to 5",
        ]
        tree = parse_questionnaire(lines)
        assert [s.title.en for s in tree.sections] == ["General Questions", "2. Comments"]
        assert _question(tree, "1").question_type == QuestionType.RADIO
        rating = _question(tree, "3")
        assert rating.question_type == QuestionType.RADIO
        assert [o.label.en for o in rating.options] == ["1", "2", "3", "4", "5"]

    def test_unnumbered_document(self) -> None:
        """Without numbering, questions are found by their question marks."""
        lines = ["Do you smoke?", "( ) Yes", "( ) No", "What is your name?"]
        tree = parse_questionnaire(lines)
        assert len(tree.sections) == 1
        questions = tree.sections[0].questions
        assert [q.id for q in questions] == ["q1", "q2"]
        assert [q.question_type for q in questions] == [QuestionType.BOOLEAN, QuestionType.TEXT]
        assert questions[0].question_number is None

    def test_bold_heading_from_html(self) -> None:
        """A bold line in the HTML opens a section."""
        lines = ["Informata shtesë", "4.1 A keni komente?", "( ) Po", "( ) Jo"]
        html = "<p><strong>Informata shtesë</strong></p><p>4.1 A keni komente?</p>"
        tree = parse_questionnaire(lines, html)
        assert [s.title.en for s in tree.sections] == ["Informata shtesë"]

    def test_empty_document(self) -> None:
        """An empty document gives a single empty section."""
        tree = parse_questionnaire([])
        assert len(tree.sections) == 1
        assert tree.sections[0].title.en == "General Questions"
        assert tree.sections[0].questions == []
        assert tree.metadata.total_questions == 0

    def test_parse_text(self) -> None:
        """Raw text is split into lines first."""
        tree = parse_text("1.1 Emri\n\n1.2 A jeni anëtar?\n( ) Po\n( ) Jo\n")
        assert [q.id for q in tree.iter_questions()] == ["1.1", "1.2"]


class TestParserOptions:
    """Tests for tunable limits."""

    def test_select_threshold(self) -> None:
        """A higher threshold keeps the long list as radio."""
        tree = QuestionnaireParser(ParserOptions(select_threshold=20)).parse(DOCUMENT)
        assert _question(tree, "2.3").question_type == QuestionType.RADIO

    def test_window_size(self) -> None:
        """The window limit caps how many options are read."""
        tree = QuestionnaireParser(ParserOptions(window_size=5)).parse(DOCUMENT)
        assert len(_question(tree, "2.3").options) == 5

    def test_parser_is_reusable(self) -> None:
        """Parsing the same document twice gives the same tree."""
        parser = QuestionnaireParser()
        assert parser.parse(DOCUMENT) == parser.parse(DOCUMENT)


class TestInputContract:
    """Tests for contract violations."""

    @pytest.mark.parametrize("lines", ["1.1 Emri", None, 42, [1, 2]])
    def test_invalid_lines(self, lines: object) -> None:
        with pytest.raises(TypeError):
            parse_questionnaire(lines)  # type: ignore[arg-type]

    def test_invalid_html(self) -> None:
        with pytest.raises(TypeError):
            parse_questionnaire(["1.1 Emri"], None)  # type: ignore[arg-type]
