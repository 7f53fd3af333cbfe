"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, Field


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft mit ihrem Stundenkontingent."""

    id: str                                # Eindeutig pro Planung, unveränderlich
    name: str                              # Anzeigename ("SS", "Müller, Hans")
    allowance: float = Field(0.0, ge=0)    # Max. zuweisbare Stunden (Bruchteile erlaubt)
