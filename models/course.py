"""Datenmodelle für Kurse und ihre Unterrichtseinheiten (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Unit(BaseModel):
    """Eine Unterrichtseinheit (Modul) eines Kurses.

    ``assignments`` ist eine dünn besetzte Zuordnung Lehrkraft-ID → Stunden.
    Einträge mit Stunden <= 0 existieren nie; beim Laden werden sie verworfen.
    Die Lehrkraft-IDs müssen nicht mehr gültig sein (z.B. nach einem Restore),
    sie werden dann bei der Aggregation ignoriert.
    """

    id: str
    name: str
    assignments: dict[str, float] = {}

    @field_validator("assignments")
    @classmethod
    def drop_non_positive(cls, v: dict[str, float]) -> dict[str, float]:
        return {tid: hours for tid, hours in v.items() if hours > 0}


class Course(BaseModel):
    """Ein Bildungsgang mit optionalem Stunden-Soll und geordneten Einheiten."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    target_hours: Optional[float] = Field(None, alias="targetHours")
    units: list[Unit] = []            # Reihenfolge = Anzeigereihenfolge

    def find_unit(self, unit_id: str) -> Optional[Unit]:
        return next((u for u in self.units if u.id == unit_id), None)
