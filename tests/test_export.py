"""Tests für Textbericht und Terminal-Renderer."""

from pathlib import Path

from rich.console import Console

from models.report import format_score, render_report, write_report
from export.tui_renderer import render_student_rows, student_panel, student_table
from models.student import Student


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_students() -> list[Student]:
    return [
        Student(id="1", name="Budi", className="10A",
                grades={"Matematika": 90, "Fisika": 60}),
        Student(id="2", name="Siti", className="10B"),
        Student(id="3", name="Andi", className="10A", grades={"Kimia": 87.5}),
    ]


EXPECTED_REPORT = "\n".join([
    "ID: 1",
    "Nama: Budi",
    "Kelas: 10A",
    "Mata Pelajaran:",
    "  - Matematika: 90",
    "  - Fisika: 60",
    "Rata-rata: 75.00",
    "Status: Lulus",
    "------------------------",
    "ID: 2",
    "Nama: Siti",
    "Kelas: 10B",
    "Mata Pelajaran:",
    "  - (Belum ada nilai)",
    "Rata-rata: 0.00",
    "Status: Tidak Lulus",
    "------------------------",
    "ID: 3",
    "Nama: Andi",
    "Kelas: 10A",
    "Mata Pelajaran:",
    "  - Kimia: 87.5",
    "Rata-rata: 87.50",
    "Status: Lulus",
    "------------------------",
])


# ─── TEXTBERICHT ──────────────────────────────────────────────────────────────

class TestTextReport:
    def test_render_exact_shape(self):
        assert render_report(_make_students()) == EXPECTED_REPORT

    def test_render_empty(self):
        assert render_report([]) == ""

    def test_write_report(self, tmp_path: Path):
        out = write_report(_make_students(), tmp_path / "laporan.txt")
        assert out.read_text(encoding="utf-8") == EXPECTED_REPORT

    def test_average_two_decimals(self):
        s = Student(id="9", name="Rina", className="10C",
                    grades={"A": 70, "B": 71, "C": 71})
        assert "Rata-rata: 70.67" in render_report([s])

    def test_format_score(self):
        assert format_score(100.0) == "100"
        assert format_score(0.0) == "0"
        assert format_score(72.25) == "72.25"

    def test_format_small_scores_without_exponent(self):
        """Kleine Werte bis 1e-6 ohne Exponent, darunter wie '1.5e-7'."""
        assert format_score(0.00001) == "0.00001"
        assert format_score(0.000015) == "0.000015"
        assert format_score(0.000001) == "0.000001"
        assert format_score(1.5e-7) == "1.5e-7"

    def test_small_score_in_report(self):
        s = Student(id="9", name="Rina", className="10C", grades={"A": 0.00001})
        assert "  - A: 0.00001" in render_report([s]).splitlines()


# ─── TERMINAL-RENDERER ────────────────────────────────────────────────────────

class TestTuiRenderer:
    def test_rows(self):
        rows = render_student_rows(_make_students())
        assert rows[0] == ["1", "Budi", "10A", "Matematika: 90, Fisika: 60", "75.00", "Lulus"]
        assert rows[1][3] == "—"
        assert rows[1][-1] == "Tidak Lulus"

    def test_table_and_panel_render(self):
        console = Console(record=True, width=120)
        students = _make_students()
        console.print(student_table(students))
        console.print(student_panel(students[0]))
        text = console.export_text()
        assert "Budi" in text
        assert "Rata-rata: 75.00" in text
