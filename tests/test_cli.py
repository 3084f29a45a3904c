"""Tests für die click-Befehle und das interaktive Menü."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "students.json"


def _invoke(runner: CliRunner, data_file: Path, *args: str, input: str = None):
    return runner.invoke(
        cli,
        ["--config", str(data_file.parent / "app_config.yaml"),
         "--data-file", str(data_file), *args],
        input=input,
    )


def _stored(data_file: Path) -> list[dict]:
    return json.loads(data_file.read_text(encoding="utf-8"))


# ─── STAMMDATEN ───────────────────────────────────────────────────────────────

class TestCommands:
    def test_add_and_show(self, runner, data_file):
        result = _invoke(runner, data_file, "add", "1", "Budi", "10A",
                         "-g", "Matematika=90", "-g", "Fisika=60")
        assert result.exit_code == 0, result.output
        assert _stored(data_file) == [{
            "id": "1", "name": "Budi", "className": "10A",
            "grades": {"Matematika": 90.0, "Fisika": 60.0},
        }]

        result = _invoke(runner, data_file, "show", "1")
        assert result.exit_code == 0
        assert "Rata-rata: 75.00" in result.output

    def test_add_drops_invalid_grade(self, runner, data_file):
        result = _invoke(runner, data_file, "add", "1", "Budi", "10A",
                         "-g", "Matematika=150")
        assert result.exit_code == 0
        assert _stored(data_file)[0]["grades"] == {}
        assert "tidak valid" in result.output

    def test_add_duplicate_fails(self, runner, data_file):
        _invoke(runner, data_file, "add", "1", "Budi", "10A")
        result = _invoke(runner, data_file, "add", "1", "Siti", "10B")
        assert result.exit_code == 1
        assert len(_stored(data_file)) == 1

    def test_bad_grade_format(self, runner, data_file):
        result = _invoke(runner, data_file, "add", "1", "Budi", "10A", "-g", "Matematika")
        assert result.exit_code == 2

    def test_update_remove(self, runner, data_file):
        _invoke(runner, data_file, "add", "1", "Budi", "10A", "-g", "Math=80")
        result = _invoke(runner, data_file, "update", "1", "--name", "Andi",
                         "-g", "Math=150")
        assert result.exit_code == 0
        stored = _stored(data_file)[0]
        assert stored["name"] == "Andi"
        assert stored["grades"] == {"Math": 80.0}

        result = _invoke(runner, data_file, "remove", "1")
        assert result.exit_code == 0
        assert _stored(data_file) == []

        result = _invoke(runner, data_file, "remove", "1")
        assert result.exit_code == 1

    def test_grade_command(self, runner, data_file):
        _invoke(runner, data_file, "add", "1", "Budi", "10A")
        assert _invoke(runner, data_file, "grade", "1", "Kimia", "77").exit_code == 0
        assert _stored(data_file)[0]["grades"] == {"Kimia": 77.0}
        assert _invoke(runner, data_file, "grade", "1", "Kimia", "abc").exit_code == 1

    def test_show_missing(self, runner, data_file):
        result = _invoke(runner, data_file, "show", "404")
        assert result.exit_code == 1


# ─── ABFRAGEN & EXPORT ────────────────────────────────────────────────────────

class TestQueries:
    def test_list_empty(self, runner, data_file):
        result = _invoke(runner, data_file, "list")
        assert result.exit_code == 0
        assert "Belum ada data siswa" in result.output

    def test_top_and_filter(self, runner, data_file):
        _invoke(runner, data_file, "add", "A", "Ani", "10A", "-g", "M=50")
        _invoke(runner, data_file, "add", "B", "Beni", "10B", "-g", "M=90")
        result = _invoke(runner, data_file, "top", "-n", "1")
        assert result.exit_code == 0
        assert "Beni" in result.output
        assert "Ani" not in result.output

        result = _invoke(runner, data_file, "filter", "10a")
        assert "Tidak ada siswa di kelas 10a" in result.output

    def test_export(self, runner, data_file, tmp_path):
        _invoke(runner, data_file, "add", "1", "Budi", "10A")
        target = tmp_path / "laporan.txt"
        result = _invoke(runner, data_file, "export", str(target))
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").splitlines()[:3] == \
               ["ID: 1", "Nama: Budi", "Kelas: 10A"]

    def test_config_init(self, runner, data_file, tmp_path):
        target = tmp_path / "neu.yaml"
        result = _invoke(runner, data_file, "config", "init", "--path", str(target))
        assert result.exit_code == 0
        assert target.exists()


# ─── INTERAKTIVES MENÜ ────────────────────────────────────────────────────────

class TestMenu:
    def test_menu_add_and_quit(self, runner, data_file):
        keys = "\n".join([
            "1", "5", "Dewi", "10A",     # Tambah siswa
            "y", "Matematika", "88",     # eine Note
            "n",
            "6", "5", "Fisika", "200",   # ungültige Note → Fehlermeldung
            "9", "10A",                  # Filter
            "0",
        ]) + "\n"
        result = _invoke(runner, data_file, input=keys)
        assert result.exit_code == 0, result.output
        assert "Siswa berhasil ditambahkan." in result.output
        assert "Gagal menambah nilai" in result.output
        assert "Sampai jumpa!" in result.output
        assert _stored(data_file) == [{
            "id": "5", "name": "Dewi", "className": "10A",
            "grades": {"Matematika": 88.0},
        }]

    def test_menu_invalid_choice(self, runner, data_file):
        result = _invoke(runner, data_file, "menu", input="x\n0\n")
        assert result.exit_code == 0
        assert "Pilihan tidak valid" in result.output

    def test_menu_remaining_entries(self, runner, data_file, tmp_path):
        """Anzeigen, Suchen, Ändern, Top-Liste, Export und Löschen über das Menü."""
        _invoke(runner, data_file, "add", "1", "Budi", "10A", "-g", "M=90")
        _invoke(runner, data_file, "add", "2", "Siti", "10B", "-g", "M=60")
        report = tmp_path / "laporan.txt"
        keys = "\n".join([
            "2",                                  # Lihat semua
            "3", "1",                             # Cari vorhanden
            "3", "99",                            # Cari fehlt
            "4", "2", "Sita", "",                 # Update: Name neu, Klasse bleibt
            "y", "Fisika", "80", "",              # eine Note, dann fertig
            "7",                                  # Top 3
            "8", str(report),                     # Export
            "5", "1",                             # Hapus
            "5", "1",                             # Hapus erneut → Fehler
            "0",
        ]) + "\n"
        result = _invoke(runner, data_file, "menu", input=keys)
        assert result.exit_code == 0, result.output
        out = result.output
        assert "Daftar Siswa" in out
        assert "Nama: Budi" in out
        assert "Siswa tidak ditemukan" in out
        assert "Data siswa berhasil diupdate." in out
        assert "Top 3 Siswa" in out
        assert "Laporan berhasil diexport" in out
        assert "Siswa berhasil dihapus." in out
        assert "Gagal menghapus" in out
        assert "Sampai jumpa!" in out

        assert report.read_text(encoding="utf-8").splitlines()[:3] == \
               ["ID: 1", "Nama: Budi", "Kelas: 10A"]
        assert _stored(data_file) == [{
            "id": "2", "name": "Sita", "className": "10B",
            "grades": {"M": 60.0, "Fisika": 80.0},
        }]

    def test_menu_export_failure_keeps_running(self, runner, data_file, tmp_path):
        """Export in ein unbeschreibbares Ziel → Fehlermeldung, Menü läuft weiter."""
        _invoke(runner, data_file, "add", "1", "Budi", "10A")
        blocker = tmp_path / "blocker"
        blocker.write_text("keine Verzeichnis", encoding="utf-8")
        keys = "\n".join(["8", str(blocker / "laporan.txt"), "2", "0"]) + "\n"
        result = _invoke(runner, data_file, "menu", input=keys)
        assert result.exit_code == 0, result.output
        assert "Gagal export" in result.output
        assert "Sampai jumpa!" in result.output
        assert not (blocker / "laporan.txt").exists()
        assert len(_stored(data_file)) == 1
