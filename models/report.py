"""Textbericht (laporan) für alle Schüler.

Ein Block pro Schüler, Zeilen mit '\\n' verbunden, ohne abschließenden
Zeilenumbruch:

    ID: 1
    Nama: Budi
    Kelas: 10A
    Mata Pelajaran:
      - Matematika: 90
    Rata-rata: 90.00
    Status: Lulus
    ------------------------
"""

import logging
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path

from models.errors import StorageError
from models.student import Student

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 24
NO_GRADES = "  - (Belum ada nilai)"


def format_score(score: float) -> str:
    """90.0 → '90', 87.5 → '87.5', 0.00001 → '0.00001'.

    Exponentschreibweise erst unterhalb von 1e-6 (z.B. '1.5e-7').
    """
    if float(score).is_integer():
        return str(int(score))
    text = repr(float(score))
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    if int(exponent) >= -6:
        return format(Decimal(text), "f")
    return f"{mantissa}e{int(exponent)}"


def format_average(value: float) -> str:
    return f"{value:.2f}"


def student_lines(student: Student) -> list[str]:
    """Zeilen eines Berichtsblocks für einen Schüler."""
    lines = [
        f"ID: {student.id}",
        f"Nama: {student.name}",
        f"Kelas: {student.class_name}",
        "Mata Pelajaran:",
    ]
    grades = student.grades
    if not grades:
        lines.append(NO_GRADES)
    else:
        for subject, score in grades.items():
            lines.append(f"  - {subject}: {format_score(score)}")
    lines.append(f"Rata-rata: {format_average(student.average())}")
    lines.append(f"Status: {student.status().value}")
    lines.append(SEPARATOR)
    return lines


def render_report(students: Iterable[Student]) -> str:
    lines: list[str] = []
    for s in students:
        lines.extend(student_lines(s))
    return "\n".join(lines)


def write_report(students: Iterable[Student], destination: Path) -> Path:
    """Schreibt den Bericht nach destination; Fehler → StorageError."""
    path = Path(destination)
    text = render_report(students)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise StorageError(f"Gagal export: {e}") from e
    logger.info(f"Bericht gespeichert: {path}")
    return path
