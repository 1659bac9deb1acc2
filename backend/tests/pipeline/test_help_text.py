"""Tests for help-text resolution."""

from pipeline.questionnaire.emphasis import build_emphasis_index
from pipeline.questionnaire.help_text import parenthetical_help_text, resolve_help_text


class TestParentheticalHelpText:
    """Tests for the window-based source."""

    def test_instruction_line(self) -> None:
        """A parenthesised line under the question is its help text."""
        window = ["(Ju lutem zgjidhni vetëm një nga opsionet)", "( ) Po", "( ) Jo"]
        assert parenthetical_help_text(window) == "Ju lutem zgjidhni vetëm një nga opsionet"

    def test_trailing_counter_allowed(self) -> None:
        """A trailing line counter after the parenthesis is tolerated."""
        window = ["(Nëse po, kaloni te pyetja 4.1) 118"]
        assert parenthetical_help_text(window) == "Nëse po, kaloni te pyetja 4.1"

    def test_short_text_ignored(self) -> None:
        """Parenthesised text must be longer than the minimum length."""
        assert parenthetical_help_text(["(shënim)"]) == ""

    def test_yes_no_token_ignored(self) -> None:
        """A parenthesised yes/no token is not an instruction."""
        assert parenthetical_help_text(["(Po)"], min_length=0) == ""

    def test_scan_stops_at_options(self) -> None:
        """Parenthetical text after the options belongs elsewhere."""
        window = ["( ) Po", "(Kjo pyetje është opsionale)"]
        assert parenthetical_help_text(window) == ""

    def test_multiple_lines_joined(self) -> None:
        """Several instruction lines are joined with a space."""
        window = ["(Select one answer only)", "(Skip if not applicable)", "( ) A"]
        assert parenthetical_help_text(window) == "Select one answer only Skip if not applicable"


class TestResolveHelpText:
    """Tests for the combined resolver."""

    def test_window_source_preferred(self) -> None:
        """Window text wins over emphasis."""
        index = build_emphasis_index("<p>1.1 Emri</p><p><em>Shkruani emrin e plotë</em></p>")
        help_text = resolve_help_text("1.1 Emri", ["(Emri dhe mbiemri juaj)"], index)
        assert help_text == "Emri dhe mbiemri juaj"

    def test_emphasis_fallback(self) -> None:
        """Without window text, the nearest italic span is used."""
        index = build_emphasis_index("<p>1.1 Emri</p><p><em>Shkruani emrin e plotë</em></p>")
        assert resolve_help_text("1.1 Emri", [], index) == "Shkruani emrin e plotë"

    def test_no_source(self) -> None:
        """No source gives empty help text, not an error."""
        assert resolve_help_text("1.1 Emri", ["( ) Po"], None) == ""
        assert resolve_help_text("1.1 Emri", [], build_emphasis_index("")) == ""
