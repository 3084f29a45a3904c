"""Interaktives Hauptmenü der Schülerverwaltung.

Führt den Nutzer über nummerierte Einträge durch alle Operationen des
StudentManager. Fehler werden angezeigt, beenden das Menü aber nie.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from config.schema import AppConfig
from export.tui_renderer import student_panel, student_table
from models.errors import StudentError
from models.student import Student
from models.student_manager import StudentManager

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _error(text: str, err: Exception) -> None:
    console.print(f"[red]✗[/red] {text}: {err}")


def _ask(label: str) -> str:
    return Prompt.ask(label, default="", show_default=False, console=console).strip()


# ─── Einzelne Abläufe ───

def add_student_flow(manager: StudentManager) -> None:
    _header("Tambah Siswa Baru")
    student_id = _ask("ID")
    if not student_id:
        _warn("ID tidak valid")
        return
    if manager.find(student_id) is not None:
        _warn("ID sudah terpakai")
        return
    try:
        student = Student(id=student_id, name=_ask("Nama"), className=_ask("Kelas"))
    except StudentError as e:
        _error("Gagal menambah siswa", e)
        return

    while Confirm.ask("Tambah nilai sekarang?", default=False, console=console):
        subject = _ask("  Mata pelajaran")
        score = _ask("  Nilai (0-100)")
        try:
            student.add_grade(subject, score)
        except StudentError as e:
            _error("  Error", e)

    try:
        manager.add(student)
    except StudentError as e:
        _error("Gagal menambah siswa", e)
        return
    _success("Siswa berhasil ditambahkan.")


def view_all_flow(manager: StudentManager) -> None:
    students = manager.list_all()
    if not students:
        console.print("[dim]Belum ada data siswa.[/dim]")
        return
    console.print(student_table(students, title="Daftar Siswa"))


def find_student_flow(manager: StudentManager) -> None:
    student = manager.find(_ask("\nMasukkan ID siswa untuk mencari"))
    if student is None:
        _warn("Siswa tidak ditemukan")
    else:
        console.print(student_panel(student))


def update_student_flow(manager: StudentManager) -> None:
    student_id = _ask("\nMasukkan ID siswa untuk update")
    student = manager.find(student_id)
    if student is None:
        _warn("Siswa tidak ditemukan")
        return

    console.print("[dim]Kosongkan input jika tidak ingin mengubah field[/dim]")
    patch: dict = {}
    new_name = _ask(f"Nama ({student.name})")
    if new_name:
        patch["name"] = new_name
    new_class = _ask(f"Kelas ({student.class_name})")
    if new_class:
        patch["className"] = new_class

    if Confirm.ask("Ingin menambah/mengubah nilai?", default=False, console=console):
        grades: dict = {}
        while True:
            subject = _ask("  Mata pelajaran (kosong untuk selesai)")
            if not subject:
                break
            grades[subject] = _ask("  Nilai (0-100)")
        if grades:
            patch["grades"] = grades

    try:
        manager.update(student_id, patch)
    except StudentError as e:
        _error("Gagal update", e)
        return
    _success("Data siswa berhasil diupdate.")


def delete_student_flow(manager: StudentManager) -> None:
    try:
        manager.remove(_ask("\nMasukkan ID siswa untuk dihapus"))
    except StudentError as e:
        _error("Gagal menghapus", e)
        return
    _success("Siswa berhasil dihapus.")


def add_grade_flow(manager: StudentManager) -> None:
    student_id = _ask("\nMasukkan ID siswa untuk tambah nilai")
    if manager.find(student_id) is None:
        _warn("Siswa tidak ditemukan")
        return
    subject = _ask("Mata pelajaran")
    score = _ask("Nilai (0-100)")
    try:
        manager.add_grade(student_id, subject, score)
    except StudentError as e:
        _error("Gagal menambah nilai", e)
        return
    _success("Nilai berhasil ditambahkan.")


def view_top_flow(manager: StudentManager, n: int) -> None:
    top = manager.top_n(n)
    if not top:
        console.print("[dim]Belum ada data siswa[/dim]")
        return
    console.print(student_table(top, title=f"Top {n} Siswa"))


def export_flow(manager: StudentManager, config: AppConfig) -> None:
    file_name = _ask("\nNama file export (mis: laporan.txt)")
    if not file_name:
        _warn("Nama file tidak boleh kosong")
        return
    target = config.report_path(file_name)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        out = manager.export_report(target)
    except OSError as e:
        _error("Gagal export", e)
        return
    _success(f"Laporan berhasil diexport ke {out}")


def filter_class_flow(manager: StudentManager) -> None:
    class_name = _ask("\nMasukkan nama kelas untuk filter (mis: 10A)")
    if not class_name:
        _warn("Kelas tidak boleh kosong")
        return
    students = manager.filter_by_class(class_name)
    if not students:
        console.print(f"[dim]Tidak ada siswa di kelas {class_name}[/dim]")
        return
    console.print(student_table(students, title=f"Daftar siswa di kelas {class_name}"))


# ─── Hauptschleife ───

def _show_menu(top_n: int) -> None:
    console.print()
    console.print(Panel(
        "[bold]SISTEM MANAJEMEN NILAI SISWA[/bold]",
        border_style="cyan",
    ))
    console.print("  [bold]1.[/bold] Tambah Siswa Baru")
    console.print("  [bold]2.[/bold] Lihat Semua Siswa")
    console.print("  [bold]3.[/bold] Cari Siswa (by ID)")
    console.print("  [bold]4.[/bold] Update Data Siswa")
    console.print("  [bold]5.[/bold] Hapus Siswa")
    console.print("  [bold]6.[/bold] Tambah Nilai Siswa")
    console.print(f"  [bold]7.[/bold] Lihat Top {top_n} Siswa")
    console.print("  [bold]8.[/bold] Export Laporan ke file")
    console.print("  [bold]9.[/bold] Filter by Kelas")
    console.print("  [bold]0.[/bold] Keluar")


def run_menu(manager: StudentManager, config: Optional[AppConfig] = None) -> None:
    """Startet die Menüschleife bis zur Auswahl 0."""
    config = config or AppConfig()
    actions = {
        "1": lambda: add_student_flow(manager),
        "2": lambda: view_all_flow(manager),
        "3": lambda: find_student_flow(manager),
        "4": lambda: update_student_flow(manager),
        "5": lambda: delete_student_flow(manager),
        "6": lambda: add_grade_flow(manager),
        "7": lambda: view_top_flow(manager, config.top_n),
        "8": lambda: export_flow(manager, config),
        "9": lambda: filter_class_flow(manager),
    }
    while True:
        _show_menu(config.top_n)
        choice = Prompt.ask("\nPilih menu (0-9)", default="0", console=console).strip()
        if choice == "0":
            console.print("\nSampai jumpa!")
            break
        action = actions.get(choice)
        if action is None:
            console.print("[yellow]Pilihan tidak valid[/yellow]")
            continue
        action()
