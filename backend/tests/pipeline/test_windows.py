"""Tests for question window slicing."""

from pipeline.questionnaire.boundaries import detect_boundaries
from pipeline.questionnaire.windows import build_windows

LINES = [
    "3. Mbledhja e të dhënave",
    "3.1 A mbledhni të dhëna?",
    "( ) Po",
    "( ) Jo",
    "3.2 Si i ruani të dhënat?",
    "Përshkruani procesin",
    "4. Raportimi",
    "4.1 Sa shpesh raportoni?",
]


class TestBuildWindows:
    """Tests for build_windows."""

    def test_window_ends_at_next_boundary(self) -> None:
        """A window runs up to the next boundary of any kind."""
        windows = build_windows(LINES, detect_boundaries(LINES))
        assert [w.question.number for w in windows] == ["3.1", "3.2", "4.1"]
        assert windows[0].lines == ("( ) Po", "( ) Jo")
        assert windows[1].lines == ("Përshkruani procesin",)
        assert windows[2].lines == ()

    def test_window_truncated(self) -> None:
        """Windows never exceed max_lines."""
        lines = ["1.1 Zgjidhni vendin"] + [f"( ) Vendi {i}" for i in range(30)]
        windows = build_windows(lines, detect_boundaries(lines), max_lines=20)
        assert len(windows[0].lines) == 20
        assert windows[0].lines[0] == "( ) Vendi 0"

    def test_no_questions(self) -> None:
        """Sections alone produce no windows."""
        lines = ["3. Hyrje", "4. Përfundim"]
        assert build_windows(lines, detect_boundaries(lines)) == []
