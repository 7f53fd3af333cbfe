"""Konto-Registry: lokal registrierte Benutzer, unabhängig von deren Planungen."""

import logging
from datetime import datetime
from typing import Optional

from accounts.errors import (
    DuplicateUsername,
    InvalidCredentials,
    ReservedUsername,
    StorageError,
)
from config.defaults import ADMIN_USERNAME
from models.account import AccountRecord
from storage.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


def is_reserved(username: str) -> bool:
    """Der Admin-Name ist in jeder Schreibweise reserviert."""
    return username.lower() == ADMIN_USERNAME.lower()


class AccountRegistry:
    """Zugriff auf die Konten. Jede Operation liest und schreibt die Registry frisch.

    Benutzernamen werden case-sensitiv verglichen (nur der reservierte
    Admin-Name nicht).
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    def all(self) -> dict[str, AccountRecord]:
        return self.gateway.load_registry()

    def get(self, username: str) -> Optional[AccountRecord]:
        return self.all().get(username)

    def _save(self, registry: dict[str, AccountRecord]) -> None:
        if not self.gateway.save_registry(registry):
            raise StorageError("Die Konto-Registry")

    def create(self, username: str, password: str,
               now: Optional[datetime]) -> AccountRecord:
        """Legt ein Konto an. ``now`` wird als erster Login vermerkt (None = nie)."""
        if is_reserved(username):
            raise ReservedUsername(username)
        registry = self.all()
        if username in registry:
            raise DuplicateUsername(username)
        record = AccountRecord(password=password, last_login=now)
        registry[username] = record
        self._save(registry)
        logger.info(f"Konto '{username}' registriert")
        return record

    def verify(self, username: str, password: str, now: datetime) -> AccountRecord:
        """Prüft die Zugangsdaten und setzt bei Erfolg ``last_login``."""
        registry = self.all()
        record = registry.get(username)
        if record is None or record.password != password:
            logger.info(f"Fehlgeschlagene Anmeldung für '{username}'")
            raise InvalidCredentials()
        record = record.model_copy(update={"last_login": now})
        registry[username] = record
        self._save(registry)
        return record

    def delete(self, username: str) -> bool:
        """Löscht Konto und Planung gemeinsam. False, wenn es nichts zu löschen gab."""
        if is_reserved(username):
            return False
        registry = self.all()
        if username not in registry:
            return False
        del registry[username]
        self._save(registry)
        if not self.gateway.delete_plan(username):
            raise StorageError(f"Die Löschung der Planung von '{username}'")
        logger.info(f"Konto '{username}' samt Planung gelöscht")
        return True

    def reset_password(self, username: str, new_password: str) -> bool:
        registry = self.all()
        record = registry.get(username)
        if record is None:
            return False
        registry[username] = record.model_copy(update={"password": new_password})
        self._save(registry)
        logger.info(f"Passwort für '{username}' zurückgesetzt")
        return True
