"""Konfigurationsmanager: Laden, Speichern und Anzeigen der Planer-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import PlannerConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Kursplaner — Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "storage": (
        "Speicher",
        "Lokaler Schlüssel-Wert-Speicher (Konten + Planungen) und Backup-Ablage.",
    ),
    "display": (
        "Anzeige",
        None,
    ),
    "seed_demo_data": (
        "Neue Benutzer",
        "true = neue Konten starten mit Beispieldaten, false = leere Planung.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "planner.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.path.exists()

    # ─── Laden ───

    def load(self) -> PlannerConfig:
        """Lade Config aus YAML. Ohne Datei gelten die Standardwerte."""
        if not self.path.exists():
            return PlannerConfig()
        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return PlannerConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {self.path}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, config: PlannerConfig) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self._build_commented_yaml(config)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

    def _build_commented_yaml(self, config: PlannerConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)
        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm

    # ─── Anzeige ───

    def show(self, config: PlannerConfig) -> None:
        table = Table(title=f"Konfiguration ({self.path})", box=box.ROUNDED)
        table.add_column("Parameter", style="bold")
        table.add_column("Wert")
        table.add_row("Speicherdatei", str(config.storage.store_path))
        table.add_row("Backup-Verzeichnis", str(config.storage.backup_dir))
        table.add_row("Nachkommastellen", str(config.display.decimals))
        table.add_row("Warnschwelle Rest", f"{config.display.warn_remaining_below}h")
        table.add_row("Beispieldaten", "ja" if config.seed_demo_data else "nein")
        console.print(table)
