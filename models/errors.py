"""Fehlerklassen der Schülerverwaltung."""


class StudentError(Exception):
    """Basisklasse aller fachlichen Fehler."""


class ValidationError(StudentError, ValueError):
    """Ungültiger Feldwert (leerer Text, Nilai außerhalb 0-100, keine Zahl)."""


class DuplicateIdError(StudentError):
    """Ein Schüler mit dieser ID existiert bereits."""


class NotFoundError(StudentError, KeyError):
    """Kein Schüler mit dieser ID vorhanden."""

    def __str__(self) -> str:
        # KeyError würde die Meldung in Anführungszeichen setzen
        return str(self.args[0]) if self.args else ""


class StorageError(StudentError, OSError):
    """Datendatei oder Bericht konnte nicht geschrieben werden."""
