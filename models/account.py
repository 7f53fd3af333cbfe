"""Datenmodelle für Benutzerkonten, Sitzungszeiger und Backups (Pydantic v2)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.plan import PlanData


class AccountRecord(BaseModel):
    """Ein lokal registriertes Konto. Passwort im Klartext (kein Sicherheitsmodell)."""

    model_config = ConfigDict(populate_by_name=True)

    password: str
    last_login: Optional[datetime] = Field(None, alias="lastLogin")


class SessionPointer(BaseModel):
    """Persistierter Zeiger auf die aktive Sitzung (Benutzer oder Admin)."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    last_login: Optional[datetime] = Field(None, alias="lastLogin")
    is_admin: bool = Field(False, alias="isAdmin")

    def to_storage(self) -> dict:
        if self.is_admin:
            return {"isAdmin": True, "username": self.username}
        return self.model_dump(mode="json", by_alias=True, exclude={"is_admin"},
                               exclude_none=True)


class BackupDocument(BaseModel):
    """Komplettsicherung: Konto-Registry plus Planungsstand aller Benutzer."""

    model_config = ConfigDict(populate_by_name=True)

    version: str
    timestamp: datetime
    users: dict[str, AccountRecord]
    user_data: dict[str, PlanData] = Field(default_factory=dict, alias="userData")

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
