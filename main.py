"""Nilai Siswa — Haupt-CLI der Schülerverwaltung.

Verwendung:
  python main.py                          Interaktives Menü
  python main.py menu                     Interaktives Menü
  python main.py add <id> <nama> <kelas>  Schüler anlegen (-g Fach=Nilai)
  python main.py list                     Alle Schüler anzeigen
  python main.py show <id>                Einzelnen Schüler anzeigen
  python main.py update <id>              Name/Klasse/Noten ändern
  python main.py remove <id>              Schüler löschen
  python main.py grade <id> <fach> <n>    Note setzen
  python main.py top [-n 3]               Bestenliste
  python main.py filter <kelas>           Schüler einer Klasse
  python main.py export <datei>           Textbericht schreiben
  python main.py config show              Einstellungen anzeigen
  python main.py config init              Einstellungsdatei anlegen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich import box

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _manager(ctx: click.Context):
    """Erzeugt und lädt den StudentManager für die aktuelle Config."""
    from models.student_manager import StudentManager

    mgr = StudentManager(ctx.obj["config"].data_file)
    mgr.load()
    return mgr


def _abort(text: str, err: Exception) -> None:
    console.print(f"[red]✗ {text}:[/red] {err}")
    sys.exit(1)


def _parse_grades(values: tuple[str, ...]) -> dict[str, str]:
    """'Matematika=90' → {'Matematika': '90'}."""
    grades: dict[str, str] = {}
    for item in values:
        subject, sep, score = item.rpartition("=")
        if not sep or not subject.strip():
            raise click.BadParameter(f"Format 'Fach=Nilai' erwartet: {item!r}",
                                     param_hint="--grade")
        grades[subject.strip()] = score.strip()
    return grades


_grade_option = click.option(
    "--grade", "-g", "grades", multiple=True, metavar="FACH=NILAI",
    help="Note setzen, mehrfach verwendbar (z.B. -g Matematika=90).",
)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group(invoke_without_command=True)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Konfiguration.")
@click.option("--data-file", type=click.Path(path_type=Path), default=None,
              help="JSON-Datendatei (überschreibt die Konfiguration).")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], data_file: Optional[Path]):
    """Schülerverwaltung: Stammdaten, Noten, Bestenliste und Berichte.

    Ohne Befehl startet das interaktive Menü.
    """
    from config.manager import ConfigManager

    try:
        config = ConfigManager().load_or_default(config_path)
    except (FileNotFoundError, ValueError) as e:
        _abort("Konfiguration", e)
    if data_file is not None:
        config = config.model_copy(update={"data_file": data_file})
    _setup_logging(config.log_level)
    ctx.obj = {"config": config}

    if ctx.invoked_subcommand is None:
        ctx.invoke(cmd_menu)


# ─── MENÜ ─────────────────────────────────────────────────────────────────────

@cli.command("menu")
@click.pass_context
def cmd_menu(ctx: click.Context):
    """Startet das interaktive Menü."""
    from ui.menu import run_menu

    run_menu(_manager(ctx), ctx.obj["config"])


# ─── STAMMDATEN ───────────────────────────────────────────────────────────────

@cli.command("add")
@click.argument("student_id")
@click.argument("name")
@click.argument("kelas")
@_grade_option
@click.pass_context
def cmd_add(ctx: click.Context, student_id: str, name: str, kelas: str,
            grades: tuple[str, ...]):
    """Legt einen neuen Schüler an."""
    from models.errors import StudentError
    from models.student import Student

    mgr = _manager(ctx)
    requested = _parse_grades(grades)
    try:
        student = Student(id=student_id, name=name, className=kelas, grades=requested)
        mgr.add(student)
    except StudentError as e:
        _abort("Gagal menambah siswa", e)

    dropped = len(requested) - len(student.grades)
    if dropped:
        console.print(f"[yellow]⚠[/yellow]  {dropped} nilai tidak valid diabaikan.")
    console.print(f"[green]✓[/green] Siswa {student.id} berhasil ditambahkan.")


@cli.command("update")
@click.argument("student_id")
@click.option("--name", default=None, help="Neuer Name.")
@click.option("--kelas", default=None, help="Neue Klasse.")
@_grade_option
@click.pass_context
def cmd_update(ctx: click.Context, student_id: str, name: Optional[str],
               kelas: Optional[str], grades: tuple[str, ...]):
    """Ändert Name, Klasse und/oder Noten eines Schülers."""
    from models.errors import StudentError

    patch: dict = {}
    if name is not None:
        patch["name"] = name
    if kelas is not None:
        patch["className"] = kelas
    if grades:
        patch["grades"] = _parse_grades(grades)

    mgr = _manager(ctx)
    try:
        mgr.update(student_id, patch)
    except StudentError as e:
        _abort("Gagal update", e)
    console.print(f"[green]✓[/green] Data siswa {student_id} berhasil diupdate.")


@cli.command("remove")
@click.argument("student_id")
@click.pass_context
def cmd_remove(ctx: click.Context, student_id: str):
    """Löscht einen Schüler."""
    from models.errors import StudentError

    mgr = _manager(ctx)
    try:
        mgr.remove(student_id)
    except StudentError as e:
        _abort("Gagal menghapus", e)
    console.print(f"[green]✓[/green] Siswa {student_id} berhasil dihapus.")


@cli.command("grade")
@click.argument("student_id")
@click.argument("subject")
@click.argument("score")
@click.pass_context
def cmd_grade(ctx: click.Context, student_id: str, subject: str, score: str):
    """Setzt oder überschreibt die Note eines Fachs."""
    from models.errors import StudentError

    mgr = _manager(ctx)
    try:
        mgr.add_grade(student_id, subject, score)
    except StudentError as e:
        _abort("Gagal menambah nilai", e)
    console.print(f"[green]✓[/green] Nilai berhasil ditambahkan.")


# ─── ABFRAGEN ─────────────────────────────────────────────────────────────────

@cli.command("list")
@click.pass_context
def cmd_list(ctx: click.Context):
    """Zeigt alle Schüler an."""
    from export.tui_renderer import student_table

    students = _manager(ctx).list_all()
    if not students:
        console.print("[dim]Belum ada data siswa.[/dim]")
        return
    console.print(student_table(students))


@cli.command("show")
@click.argument("student_id")
@click.pass_context
def cmd_show(ctx: click.Context, student_id: str):
    """Zeigt einen einzelnen Schüler an."""
    from export.tui_renderer import student_panel

    student = _manager(ctx).find(student_id)
    if student is None:
        console.print(f"[red]Siswa tidak ditemukan: {student_id}[/red]")
        sys.exit(1)
    console.print(student_panel(student))


@cli.command("top")
@click.option("-n", "count", type=int, default=None,
              help="Anzahl Schüler (Default aus der Konfiguration).")
@click.pass_context
def cmd_top(ctx: click.Context, count: Optional[int]):
    """Bestenliste nach Durchschnitt."""
    from export.tui_renderer import student_table

    n = count if count is not None else ctx.obj["config"].top_n
    top = _manager(ctx).top_n(n)
    if not top:
        console.print("[dim]Belum ada data siswa[/dim]")
        return
    console.print(student_table(top, title=f"Top {n} Siswa"))


@cli.command("filter")
@click.argument("kelas")
@click.pass_context
def cmd_filter(ctx: click.Context, kelas: str):
    """Zeigt alle Schüler einer Klasse (exakter Vergleich)."""
    from export.tui_renderer import student_table

    students = _manager(ctx).filter_by_class(kelas)
    if not students:
        console.print(f"[dim]Tidak ada siswa di kelas {kelas}[/dim]")
        return
    console.print(student_table(students, title=f"Daftar siswa di kelas {kelas}"))


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@cli.command("export")
@click.argument("datei")
@click.pass_context
def cmd_export(ctx: click.Context, datei: str):
    """Schreibt den Textbericht (relativ zu report_dir)."""
    target = ctx.obj["config"].report_path(datei)
    mgr = _manager(ctx)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        out = mgr.export_report(target)
    except OSError as e:
        _abort("Gagal export", e)
    console.print(f"[green]✓[/green] Laporan berhasil diexport ke {out}")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@cli.group("config")
def cmd_config():
    """Einstellungen anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktiven Einstellungen an."""
    config = ctx.obj["config"]
    table = Table(title="Einstellungen", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    for k, v in config.model_dump().items():
        table.add_row(k, str(v))
    console.print(table)


@cmd_config.command("init")
@click.option("--path", "path", type=click.Path(path_type=Path), default=None,
              help="Zielpfad (Default: config/app_config.yaml).")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Datei überschreiben.")
@click.pass_context
def config_init(ctx: click.Context, path: Optional[Path], force: bool):
    """Schreibt die aktiven Einstellungen als YAML-Datei."""
    from config.manager import ConfigManager

    mgr = ConfigManager()
    target = path or mgr.DEFAULT_CONFIG
    if target.exists() and not force:
        console.print(
            f"[yellow]Konfiguration existiert bereits: {target}[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(ctx.obj["config"], target)
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")


def main():
    """Einstiegspunkt."""
    cli()


if __name__ == "__main__":
    main()
