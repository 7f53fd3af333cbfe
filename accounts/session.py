"""Sitzungssteuerung: wer ist angemeldet, welche Planung ist geladen.

Zustände::

    Unauthenticated ──register/login──▶ Authenticated(user) ──logout──▶ Unauthenticated
    Unauthenticated ──admin_login────▶ AdminAuthenticated  ──logout──▶ Unauthenticated

Der Sitzungszeiger wird persistiert, damit ``restore()`` nach einem
Neustart (neuer CLI-Aufruf) dieselbe Sitzung wiederherstellt.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from accounts.errors import (
    AdminRequired,
    InvalidCredentials,
    MissingCredentials,
    NotAuthenticated,
    StorageError,
)
from accounts.registry import AccountRegistry
from config.defaults import (
    ADMIN_DISPLAY_NAME,
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    demo_plan,
    empty_plan,
)
from models.account import AccountRecord, BackupDocument, SessionPointer
from models.plan import PlanData
from storage.backup import ImportResult, apply_backup, build_backup, read_backup_file
from storage.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(username: str, password: str) -> tuple[str, str]:
    username, password = username.strip(), password.strip()
    if not username or not password:
        raise MissingCredentials()
    return username, password


class SessionController:
    """Verbindet Konten, Persistenz und Mutations-API für genau eine Sitzung."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        seed_demo_data: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.gateway = gateway
        self.accounts = AccountRegistry(gateway)
        self.seed_demo_data = seed_demo_data
        self.clock = clock
        self.pointer: Optional[SessionPointer] = None
        self._plan: Optional[PlanData] = None

    # ─── Zustand ───

    @property
    def is_authenticated(self) -> bool:
        return self.pointer is not None and not self.pointer.is_admin

    @property
    def is_admin(self) -> bool:
        return self.pointer is not None and self.pointer.is_admin

    @property
    def username(self) -> Optional[str]:
        return self.pointer.username if self.pointer else None

    @property
    def plan(self) -> PlanData:
        """Planung des angemeldeten Benutzers."""
        if not self.is_authenticated or self._plan is None:
            raise NotAuthenticated()
        return self._plan

    def _require_admin(self) -> None:
        if not self.is_admin:
            raise AdminRequired()

    # ─── An-/Abmeldung ───

    def restore(self) -> Optional[SessionPointer]:
        """Stellt die persistierte Sitzung wieder her (falls vorhanden und gültig)."""
        pointer = self.gateway.load_session()
        if pointer is None:
            self.pointer, self._plan = None, None
            return None
        if pointer.is_admin:
            self.pointer, self._plan = pointer, None
            return pointer
        if self.accounts.get(pointer.username) is None:
            logger.warning(f"Sitzung für gelöschtes Konto '{pointer.username}' verworfen")
            self.logout()
            return None
        self.pointer = pointer
        self._plan = self._load_plan(pointer.username)
        return pointer

    def register(self, username: str, password: str) -> SessionPointer:
        username, password = _clean(username, password)
        record = self.accounts.create(username, password, self.clock())
        return self._start_user_session(username, record)

    def login(self, username: str, password: str) -> SessionPointer:
        username, password = _clean(username, password)
        record = self.accounts.verify(username, password, self.clock())
        logger.info(f"'{username}' angemeldet")
        return self._start_user_session(username, record)

    def admin_login(self, username: str, password: str) -> SessionPointer:
        """Nur exakt das fest eingebaute Admin-Paar; die Registry wird nicht gelesen."""
        if username != ADMIN_USERNAME or password != ADMIN_PASSWORD:
            raise InvalidCredentials()
        self.pointer = SessionPointer(username=ADMIN_DISPLAY_NAME, is_admin=True)
        self._plan = None
        self._save_session()
        logger.info("Administrator angemeldet")
        return self.pointer

    def authenticate(self, username: str, password: str) -> SessionPointer:
        """Anmeldeformular: erst Admin-Paar prüfen, sonst normales Login."""
        username, password = _clean(username, password)
        if username == ADMIN_USERNAME and password == ADMIN_PASSWORD:
            return self.admin_login(username, password)
        return self.login(username, password)

    def logout(self) -> None:
        """Beendet die Sitzung. Gespeicherte Daten bleiben unberührt."""
        if self.pointer is not None:
            logger.info(f"'{self.pointer.username}' abgemeldet")
        self.pointer, self._plan = None, None
        if not self.gateway.clear_session():
            raise StorageError("Die Abmeldung")

    def _start_user_session(self, username: str, record: AccountRecord) -> SessionPointer:
        self.pointer = SessionPointer(username=username, last_login=record.last_login)
        self._plan = self._load_plan(username)
        self._save_session()
        return self.pointer

    def _save_session(self) -> None:
        if not self.gateway.save_session(self.pointer):
            self.pointer, self._plan = None, None
            raise StorageError("Die Sitzung")

    def _load_plan(self, username: str) -> PlanData:
        plan = self.gateway.load_plan(username)
        if plan is not None:
            return plan
        plan = demo_plan() if self.seed_demo_data else empty_plan()
        if not self.gateway.save_plan(username, plan):
            logger.warning(f"Startplanung für '{username}' nicht gespeichert")
        return plan

    # ─── Planung ───

    def apply(self, mutation: Callable[..., PlanData], *args: Any, **kwargs: Any) -> PlanData:
        """Wendet eine Funktion aus ``planning.mutations`` an und speichert das Ergebnis."""
        plan = mutation(self.plan, *args, **kwargs)
        if not self.gateway.save_plan(self.pointer.username, plan):
            raise StorageError("Die Planung")
        self._plan = plan
        return plan

    # ─── Administration ───

    def list_accounts(self) -> dict[str, AccountRecord]:
        self._require_admin()
        return dict(sorted(self.accounts.all().items()))

    def create_account(self, username: str, password: str) -> AccountRecord:
        """Legt ein Konto an, ohne die Admin-Sitzung zu verlassen."""
        self._require_admin()
        username, password = _clean(username, password)
        return self.accounts.create(username, password, None)

    def delete_account(self, username: str) -> bool:
        self._require_admin()
        return self.accounts.delete(username)

    def reset_password(self, username: str, new_password: str) -> bool:
        self._require_admin()
        new_password = new_password.strip()
        if not new_password:
            raise MissingCredentials()
        return self.accounts.reset_password(username, new_password)

    def export_backup(self) -> BackupDocument:
        self._require_admin()
        return build_backup(self.gateway)

    def import_backup(self, document: Any) -> ImportResult:
        self._require_admin()
        return apply_backup(self.gateway, document)

    def import_backup_file(self, path: Path) -> ImportResult:
        """Liest die Datei vollständig ein, erst dann wird die Registry angefasst."""
        self._require_admin()
        document = read_backup_file(path)
        return apply_backup(self.gateway, document)
