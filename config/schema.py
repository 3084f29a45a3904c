from pathlib import Path

from pydantic import BaseModel, Field, field_validator


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):
    """Einstellungen der Schülerverwaltung."""
    # JSON-Datendatei mit allen Schülern
    data_file: Path = Field(Path("students.json"),
        description="JSON-Datendatei mit allen Schülern")
    # Zielordner für exportierte Berichte (relative Dateinamen)
    report_dir: Path = Field(Path("output"),
        description="Zielordner für exportierte Berichte")
    # Anzahl Schüler in der Bestenliste
    top_n: int = Field(3, ge=1, le=100,
        description="Anzahl Schüler in der Bestenliste")
    # Log-Level für die Konsole
    log_level: str = Field("WARNING",
        description="Log-Level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return level

    def report_path(self, file_name: str) -> Path:
        """Relative Dateinamen landen in report_dir, absolute bleiben."""
        path = Path(file_name)
        if path.is_absolute():
            return path
        return self.report_dir / path
