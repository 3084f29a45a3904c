"""Datenmodell für einen Schüler inkl. Noten (Pydantic v2)."""

import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic import ValidationError as PydanticValidationError

from models.errors import ValidationError

logger = logging.getLogger(__name__)

PASSING_AVERAGE = 75.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0


class GradeStatus(str, Enum):
    LULUS = "Lulus"
    TIDAK_LULUS = "Tidak Lulus"


# ─── Feldprüfung ───

def clean_text(value: Any, message: str) -> str:
    """Gibt den getrimmten Text zurück oder wirft ValidationError."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def coerce_score(value: Any) -> Optional[float]:
    """Wandelt einen Nilai in float um; None wenn ungültig.

    Akzeptiert int/float (kein bool) und Strings, die sich als Zahl lesen
    lassen. Gültig sind nur endliche Werte im Bereich 0–100.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        score = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(score) or not MIN_SCORE <= score <= MAX_SCORE:
        return None
    return score


def _first_message(exc: PydanticValidationError) -> str:
    """Extrahiert eine lesbare Meldung aus einem Pydantic-Fehler."""
    err = exc.errors()[0]
    original = (err.get("ctx") or {}).get("error")
    if isinstance(original, ValidationError):
        return str(original)
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


class Student(BaseModel):
    """Repräsentiert einen Schüler mit Klasse und Noten je Fach.

    Noten liegen in einem privaten Dict und werden nur als Kopie
    herausgegeben. Änderungen laufen über set_name, set_class_name und
    add_grade.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(frozen=True)
    name: str
    class_name: str = Field(alias="className")

    _grades: dict[str, float] = PrivateAttr(default_factory=dict)

    def __init__(self, grades: Optional[Mapping[str, Any]] = None, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise ValidationError(_first_message(e)) from e

        if grades is None:
            return
        if not isinstance(grades, Mapping):
            logger.debug(f"Noten für {self.id} ignoriert: kein Mapping ({type(grades).__name__})")
            return
        # Nachsichtiger Import: ungültige Einträge werden verworfen
        for subject, raw in grades.items():
            score = coerce_score(raw)
            if not isinstance(subject, str) or not subject.strip() or score is None:
                logger.debug(f"Ungültige Note verworfen ({self.id}): {subject!r}={raw!r}")
                continue
            self._grades[subject.strip()] = score

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            raise ValidationError(_first_message(e)) from e

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, v: Any) -> str:
        return clean_text(v, "ID tidak valid")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v: Any) -> str:
        return clean_text(v, "Nama tidak boleh kosong")

    @field_validator("class_name", mode="before")
    @classmethod
    def _check_class_name(cls, v: Any) -> str:
        return clean_text(v, "Kelas tidak boleh kosong")

    # ─── Noten ───

    @property
    def grades(self) -> dict[str, float]:
        """Kopie der Noten (Fach → Nilai)."""
        return dict(self._grades)

    def add_grade(self, subject: Any, score: Any) -> None:
        """Setzt oder überschreibt die Note eines Fachs."""
        subject = clean_text(subject, "Mata pelajaran tidak boleh kosong")
        value = coerce_score(score)
        if value is None:
            raise ValidationError("Nilai harus angka antara 0-100")
        self._grades[subject] = value

    def average(self) -> float:
        """Durchschnitt aller Noten; 0.0 ohne Noten."""
        if not self._grades:
            return 0.0
        return sum(self._grades.values()) / len(self._grades)

    def status(self) -> GradeStatus:
        """Bestanden ab Durchschnitt 75 (einschließlich)."""
        if self.average() >= PASSING_AVERAGE:
            return GradeStatus.LULUS
        return GradeStatus.TIDAK_LULUS

    # ─── Stammdaten ───

    def set_name(self, value: Any) -> None:
        self.name = clean_text(value, "Nama tidak boleh kosong")

    def set_class_name(self, value: Any) -> None:
        self.class_name = clean_text(value, "Kelas tidak boleh kosong")

    # ─── Serialisierung ───

    def to_dict(self) -> dict[str, Any]:
        """Serialisiert alle vier Felder im Format der Datendatei."""
        data = self.model_dump(by_alias=True)
        data["grades"] = self.grades
        return data

    @classmethod
    def from_dict(cls, blob: Any) -> "Student":
        """Erzeugt einen Schüler aus einem Eintrag der Datendatei."""
        if not isinstance(blob, Mapping):
            raise ValidationError("Datensatz muss ein Objekt sein")
        return cls(
            id=blob.get("id"),
            name=blob.get("name"),
            className=blob.get("className"),
            grades=blob.get("grades") or {},
        )
