"""Persistenz-Gateway: Konten, Planungen und Sitzungszeiger im Schlüssel-Wert-Speicher.

Schlüssel:
  planner_current_user     → Sitzungszeiger ({username, lastLogin} oder {isAdmin, username})
  planner_users            → Konto-Registry (username → {password, lastLogin})
  planner_data_<username>  → Planung ({teachers, courses})

Lesefehler (kaputtes JSON, ungültige Struktur, I/O) werden hier abgefangen
und als leerer Zustand behandelt; Schreibfehler werden geloggt und als
``False`` gemeldet. Nach außen dringt kein Speicherfehler.
"""

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from config.defaults import SESSION_KEY, USER_DATA_PREFIX, USERS_KEY
from models.account import AccountRecord, SessionPointer
from models.plan import PlanData
from storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def user_data_key(username: str) -> str:
    return f"{USER_DATA_PREFIX}{username}"


class PersistenceGateway:
    """Liest und schreibt alle persistenten Daten über einen injizierten Speicher."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # ─── Low-Level ───

    def _get(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except OSError as e:
            logger.error(f"Lesen von '{key}' fehlgeschlagen: {e}")
            return None

    def _decode(self, key: str, raw: str) -> Optional[Any]:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"'{key}' enthält kein gültiges JSON – wird ignoriert: {e}")
            return None

    def _read_json(self, key: str) -> Optional[Any]:
        raw = self._get(key)
        return None if raw is None else self._decode(key, raw)

    def _write_json(self, key: str, value: Any) -> bool:
        try:
            self.store.set(key, json.dumps(value, ensure_ascii=False))
        except OSError as e:
            logger.error(f"Schreiben von '{key}' fehlgeschlagen: {e}")
            return False
        return True

    def _remove(self, key: str) -> bool:
        try:
            self.store.remove(key)
        except OSError as e:
            logger.error(f"Löschen von '{key}' fehlgeschlagen: {e}")
            return False
        return True

    # ─── Konto-Registry ───

    def load_registry(self) -> dict[str, AccountRecord]:
        """Lädt alle Konten. Ungültige Einträge werden übersprungen."""
        raw = self._read_json(USERS_KEY)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning("Konto-Registry ist kein Objekt – wird als leer behandelt")
            return {}
        registry: dict[str, AccountRecord] = {}
        for username, record in raw.items():
            try:
                registry[username] = AccountRecord.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Konto '{username}' ungültig – übersprungen: {e}")
        return registry

    def save_registry(self, registry: dict[str, AccountRecord]) -> bool:
        payload = {
            username: record.model_dump(mode="json", by_alias=True, exclude_none=True)
            for username, record in registry.items()
        }
        return self._write_json(USERS_KEY, payload)

    # ─── Planungen ───

    def load_plan(self, username: str) -> Optional[PlanData]:
        """Lädt die Planung eines Benutzers.

        None, wenn nichts gespeichert ist; eine leere Planung, wenn der
        gespeicherte Stand beschädigt ist.
        """
        key = user_data_key(username)
        stored = self._get(key)
        if stored is None:
            return None
        raw = self._decode(key, stored)
        if raw is None:
            return PlanData()
        try:
            return PlanData.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Planung von '{username}' beschädigt – leere Planung: {e}")
            return PlanData()

    def save_plan(self, username: str, plan: PlanData) -> bool:
        return self._write_json(user_data_key(username), plan.to_storage())

    def delete_plan(self, username: str) -> bool:
        return self._remove(user_data_key(username))

    # ─── Sitzungszeiger ───

    def load_session(self) -> Optional[SessionPointer]:
        raw = self._read_json(SESSION_KEY)
        if raw is None:
            return None
        try:
            return SessionPointer.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Sitzungszeiger ungültig – abgemeldet: {e}")
            return None

    def save_session(self, pointer: SessionPointer) -> bool:
        return self._write_json(SESSION_KEY, pointer.to_storage())

    def clear_session(self) -> bool:
        return self._remove(SESSION_KEY)
