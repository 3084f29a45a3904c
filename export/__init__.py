"""Export-Modul: Terminal-Anzeige (rich) für Schülerlisten."""

from export.tui_renderer import render_student_rows, student_panel, student_table

__all__ = [
    "render_student_rows",
    "student_panel",
    "student_table",
]
