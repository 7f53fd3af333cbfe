"""Komplettsicherung (Export/Import) aller Konten und Planungen.

Dateiformat (JSON):
  {"version": "2.0", "timestamp": "...", "users": {...}, "userData": {...}}

Beim Import wird nur das Feld ``users`` verlangt. Fehlende oder beschädigte
``userData``-Einträge bedeuten "für diesen Benutzer nichts wiederherzustellen".
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from accounts.errors import InvalidBackupFormat, StorageError
from config.defaults import BACKUP_FORMAT_VERSION
from models.account import AccountRecord, BackupDocument
from models.plan import PlanData
from storage.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Ergebnis eines Backup-Imports."""

    users_restored: list[str] = field(default_factory=list)
    plans_restored: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)   # ungültige Konto-Einträge


def build_backup(gateway: PersistenceGateway) -> BackupDocument:
    """Erzeugt ein Backup der Registry und aller gespeicherten Planungen."""
    registry = gateway.load_registry()
    user_data: dict[str, PlanData] = {}
    for username in registry:
        plan = gateway.load_plan(username)
        if plan is not None:
            user_data[username] = plan
    return BackupDocument(
        version=BACKUP_FORMAT_VERSION,
        timestamp=datetime.now(timezone.utc),
        users=registry,
        user_data=user_data,
    )


def apply_backup(gateway: PersistenceGateway, document: Any) -> ImportResult:
    """Spielt ein Backup-Dokument (dict) ein.

    Konten und Planungen werden pro Benutzer überschrieben (last-write-wins);
    Benutzer, die im Backup fehlen, bleiben unverändert.
    """
    if not isinstance(document, dict) or not isinstance(document.get("users"), dict):
        raise InvalidBackupFormat("Feld 'users' fehlt oder ist kein Objekt")

    result = ImportResult()
    incoming: dict[str, AccountRecord] = {}
    for username, record in document["users"].items():
        try:
            incoming[username] = AccountRecord.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Backup: Konto '{username}' ungültig – übersprungen: {e}")
            result.skipped.append(username)

    raw_data = document.get("userData")
    if not isinstance(raw_data, dict):
        raw_data = {}

    # Registry einmal lesen, zusammenführen, einmal schreiben.
    registry = gateway.load_registry()
    registry.update(incoming)
    if not gateway.save_registry(registry):
        raise StorageError("Die Konto-Registry")
    result.users_restored = list(incoming)

    for username in incoming:
        raw_plan = raw_data.get(username)
        if raw_plan is None:
            continue
        try:
            plan = PlanData.model_validate(raw_plan)
        except ValidationError as e:
            logger.warning(f"Backup: Planung von '{username}' ungültig – nicht wiederhergestellt: {e}")
            continue
        if not gateway.save_plan(username, plan):
            raise StorageError(f"Die Planung von '{username}'")
        result.plans_restored.append(username)

    logger.info(
        f"Backup eingespielt: {len(result.users_restored)} Konten, "
        f"{len(result.plans_restored)} Planungen"
    )
    return result


# ─── Dateien ───

def default_backup_name(now: datetime | None = None) -> str:
    ts = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H-%M-%S")
    return f"planner_backup_{ts}.json"


def write_backup_file(document: BackupDocument, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.to_storage(), f, ensure_ascii=False, indent=2)
    return path


def read_backup_file(path: Path) -> Any:
    """Liest eine Backup-Datei vollständig ein (noch ohne Validierung)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Backup-Datei nicht gefunden: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except UnicodeDecodeError as e:
            raise InvalidBackupFormat(f"keine UTF-8-Textdatei ({e.reason})") from e
        except json.JSONDecodeError as e:
            raise InvalidBackupFormat(f"kein gültiges JSON ({e})") from e
