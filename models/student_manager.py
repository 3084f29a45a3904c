"""StudentManager: Schülerliste mit eindeutigen IDs und JSON-Persistenz.

Jede ändernde Operation schreibt anschließend die komplette Liste neu in
die Datendatei (kein inkrementelles Speichern).
"""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from models.errors import DuplicateIdError, NotFoundError, StorageError
from models.report import write_report
from models.student import Student, clean_text, coerce_score

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path("students.json")


class StudentManager:
    """Verwaltet alle Schüler in Einfügereihenfolge.

    Lebenszyklus: nach dem Erzeugen muss einmal load() aufgerufen werden,
    erst danach sind die übrigen Operationen erlaubt.
    """

    def __init__(self, data_file: Optional[Path] = None):
        self.data_file = Path(data_file) if data_file is not None else DEFAULT_DATA_FILE
        self._students: list[Student] = []
        self._loaded = False
        # Prüfen + Ändern + Speichern als ein kritischer Abschnitt
        self._lock = threading.RLock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("StudentManager.load() wurde noch nicht aufgerufen.")

    def __len__(self) -> int:
        return len(self._students)

    # ─── Persistenz ───

    def load(self) -> None:
        """Lädt die Datendatei. Fehlt sie oder ist sie defekt: leere Liste."""
        with self._lock:
            self._students = self._read_store()
            self._loaded = True

    def _read_store(self) -> list[Student]:
        path = self.data_file
        try:
            if not path.exists():
                logger.info(f"Keine Datendatei gefunden ({path}), starte mit leerer Liste.")
                return []
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(f"JSON-Array erwartet, gefunden: {type(raw).__name__}")
            loaded = [Student.from_dict(item) for item in raw]
        except Exception as e:
            logger.warning(f"Datendatei {path} nicht lesbar, starte mit leerer Liste: {e}")
            return []

        students: list[Student] = []
        seen: set[str] = set()
        for s in loaded:
            if s.id in seen:
                logger.warning(f"Doppelte ID '{s.id}' in {path} übersprungen.")
                continue
            seen.add(s.id)
            students.append(s)
        logger.debug(f"{len(students)} Schüler aus {path} geladen.")
        return students

    def save(self) -> None:
        """Schreibt die komplette Liste und ersetzt die Datendatei atomar."""
        with self._lock:
            self._require_loaded()
            payload = json.dumps(
                [s.to_dict() for s in self._students], indent=2, ensure_ascii=False
            )
            path = self.data_file
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        f.write(payload)
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise StorageError(f"Gagal menyimpan data: {e}") from e
            logger.debug(f"{len(self._students)} Schüler gespeichert: {path}")

    # ─── Ändernde Operationen ───

    def add(self, student: Student) -> None:
        """Fügt einen Schüler hinzu; die ID muss eindeutig sein."""
        if not isinstance(student, Student):
            raise TypeError("Objek harus instance Student")
        with self._lock:
            self._require_loaded()
            if self.find(student.id) is not None:
                raise DuplicateIdError(f"ID siswa harus unik: {student.id}")
            self._students.append(student)
            self.save()
        logger.info(f"Schüler {student.id} hinzugefügt.")

    def remove(self, student_id: Any) -> None:
        """Entfernt den Schüler mit der ID; Reihenfolge der übrigen bleibt."""
        with self._lock:
            self._require_loaded()
            key = str(student_id)
            for idx, s in enumerate(self._students):
                if s.id == key:
                    break
            else:
                raise NotFoundError(f"Siswa tidak ditemukan: {key}")
            del self._students[idx]
            self.save()
        logger.info(f"Schüler {key} entfernt.")

    def update(self, student_id: Any, patch: Optional[Mapping[str, Any]] = None) -> Student:
        """Übernimmt die im Patch vorhandenen Felder.

        Name und Klasse werden vor jeder Änderung geprüft; Noten werden je
        Fach eingefügt oder ersetzt, ungültige Einträge übersprungen.
        """
        with self._lock:
            self._require_loaded()
            student = self._get(student_id)
            patch = patch or {}

            name = class_name = None
            if "name" in patch:
                name = clean_text(patch["name"], "Nama tidak boleh kosong")
            class_key = "className" if "className" in patch else "class_name"
            if class_key in patch:
                class_name = clean_text(patch[class_key], "Kelas tidak boleh kosong")

            if name is not None:
                student.set_name(name)
            if class_name is not None:
                student.set_class_name(class_name)

            grades = patch.get("grades")
            if isinstance(grades, Mapping):
                for subject, raw in grades.items():
                    score = coerce_score(raw)
                    if not isinstance(subject, str) or not subject.strip() or score is None:
                        logger.debug(f"Ungültige Note im Update übersprungen: {subject!r}={raw!r}")
                        continue
                    student.add_grade(subject, score)

            self.save()
        logger.info(f"Schüler {student.id} aktualisiert.")
        return student

    def add_grade(self, student_id: Any, subject: Any, score: Any) -> Student:
        """Setzt eine einzelne Note und speichert; ungültige Eingabe → ValidationError."""
        with self._lock:
            self._require_loaded()
            student = self._get(student_id)
            student.add_grade(subject, score)
            self.save()
        return student

    # ─── Abfragen ───

    def find(self, student_id: Any) -> Optional[Student]:
        """Sucht per ID (Stringvergleich); None wenn nicht vorhanden."""
        self._require_loaded()
        key = str(student_id)
        return next((s for s in self._students if s.id == key), None)

    def _get(self, student_id: Any) -> Student:
        student = self.find(student_id)
        if student is None:
            raise NotFoundError(f"Siswa tidak ditemukan: {student_id}")
        return student

    def list_all(self) -> list[Student]:
        """Momentaufnahme der Liste in Einfügereihenfolge."""
        self._require_loaded()
        return list(self._students)

    def top_n(self, n: int = 3) -> list[Student]:
        """Die n besten Schüler nach Durchschnitt; Gleichstand in Einfügereihenfolge."""
        self._require_loaded()
        if n <= 0:
            return []
        # sorted() ist stabil, auch mit reverse=True
        ranked = sorted(self._students, key=lambda s: s.average(), reverse=True)
        return ranked[:n]

    def filter_by_class(self, class_name: str) -> list[Student]:
        """Exakter Klassenvergleich (Groß-/Kleinschreibung, ohne Trimmen)."""
        self._require_loaded()
        return [s for s in self._students if s.class_name == class_name]

    # ─── Bericht ───

    def export_report(self, destination: Path) -> Path:
        """Schreibt den Textbericht aller Schüler; die Datendatei bleibt unberührt."""
        self._require_loaded()
        return write_report(self.list_all(), destination)
