"""Gemeinsamer Renderer für die Terminal-Anzeige von Schülern.

Wird von den click-Befehlen und vom interaktiven Menü verwendet.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich import box
from rich.panel import Panel
from rich.table import Table

from models.report import format_average, format_score, student_lines

if TYPE_CHECKING:
    from models.student import Student


def render_student_rows(students: Iterable["Student"]) -> list[list[str]]:
    """Gibt Tabellenzeilen für die Schülerliste zurück.

    Jede Zeile: [ID, Nama, Kelas, Mata Pelajaran, Rata-rata, Status]
    """
    rows: list[list[str]] = []
    for s in students:
        grades = s.grades
        subjects = ", ".join(f"{sub}: {format_score(sc)}" for sub, sc in grades.items())
        rows.append([
            s.id,
            s.name,
            s.class_name,
            subjects or "—",
            format_average(s.average()),
            s.status().value,
        ])
    return rows


def student_table(students: Iterable["Student"], title: str = "Daftar Siswa") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Nama")
    table.add_column("Kelas")
    table.add_column("Mata Pelajaran")
    table.add_column("Rata-rata", justify="right")
    table.add_column("Status")
    for row in render_student_rows(students):
        status = row[-1]
        color = "green" if status == "Lulus" else "red"
        table.add_row(*row[:-1], f"[{color}]{status}[/{color}]")
    return table


def student_panel(student: "Student") -> Panel:
    """Detailansicht eines Schülers (gleiche Felder wie im Bericht)."""
    body = "\n".join(student_lines(student)[:-1])
    return Panel(body, title=f"Siswa {student.id}", border_style="cyan", expand=False)
