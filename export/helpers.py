"""Gemeinsame Hilfsfunktionen für Tabellenanzeige und Excel-Export."""

from datetime import date
from typing import Optional

from planning.aggregation import is_over_allocated, round_hours

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":      "4F46E5",
    "summary":     "E0E7FF",
    "course":      "F3F4F6",
    "assigned":    "DBEAFE",
    "over":        "FF9999",
    "warn":        "FFF2B3",
    "ok":          "B3FFB3",
}


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def format_hours(value: Optional[float], decimals: int = 1) -> str:
    """Formatiert Stunden mit fester Nachkommazahl; None → leerer String."""
    if value is None:
        return ""
    # + 0.0 macht aus -0.0 eine 0.0
    return f"{round_hours(value, decimals) + 0.0:.{decimals}f}"


def remaining_status(left: float, warn_below: float = 1.0) -> str:
    """Ampel für das Restkontingent einer Lehrkraft: 'over' | 'warn' | 'ok'."""
    if is_over_allocated(left):
        return "over"
    if left < warn_below:
        return "warn"
    return "ok"
