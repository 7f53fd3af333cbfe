from pathlib import Path

from pydantic import BaseModel, Field


# ─── SPEICHER ───

class StorageConfig(BaseModel):
    """Ablageorte für den lokalen Speicher und Backups."""
    # Verzeichnis für den lokalen Schlüssel-Wert-Speicher
    data_dir: Path = Field(Path("planner_data"),
        description="Verzeichnis für den lokalen Speicher")
    # Dateiname des Speichers innerhalb von data_dir
    store_file: str = Field("store.json",
        description="Dateiname des Schlüssel-Wert-Speichers")
    # Standardverzeichnis für Backup-Dateien
    backup_dir: Path = Field(Path("backups"),
        description="Standardverzeichnis für Backups")

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file


# ─── ANZEIGE ───

class DisplayConfig(BaseModel):
    """Darstellung der Planungstabelle."""
    # Nachkommastellen bei Stundenangaben
    decimals: int = Field(1, ge=0, le=3,
        description="Nachkommastellen bei Stunden")
    # Restkontingent unterhalb dieser Schwelle wird als Warnung markiert
    warn_remaining_below: float = Field(1.0, ge=0,
        description="Warnschwelle für Restkontingent (Stunden)")


# ─── GESAMT-CONFIG ───

class PlannerConfig(BaseModel):
    """Gesamtkonfiguration des Kursplaners."""
    storage: StorageConfig = Field(default_factory=StorageConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    # Neue Benutzer starten mit den Beispieldaten statt einer leeren Planung
    seed_demo_data: bool = Field(True,
        description="Neue Benutzer mit Beispieldaten starten")
