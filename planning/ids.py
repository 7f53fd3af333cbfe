"""Erzeugung eindeutiger IDs für Lehrkräfte, Kurse und Einheiten."""

import uuid


def new_id(prefix: str = "") -> str:
    """Gibt eine neue, kollisionsfreie ID zurück (z.B. "c-3f2a9b1c04de").

    Unabhängig von Namen oder Erstellungszeitpunkt; 12 Hex-Zeichen aus uuid4
    reichen für die Größenordnung einer Planung (< 10⁴ Objekte).
    """
    token = uuid.uuid4().hex[:12]
    return f"{prefix}-{token}" if prefix else token
