"""Gemeinsamer Renderer für die Planungstabelle (Kurs/Einheit × Lehrkraft).

Wird von ``main.py grid`` (Rich) und vom Excel-Export verwendet.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.plan import PlanData
from planning.aggregation import (
    course_assigned,
    grand_totals,
    is_over_budget,
    remaining,
    unit_assigned,
)
from export.helpers import format_hours, remaining_status


@dataclass
class GridRow:
    """Eine Zeile der Planungstabelle.

    kind: 'summary' | 'course' | 'unit'
    status: pro Zelle 'over' | 'warn' | 'ok' | '' (nur Summenzeile "Rest")
    """

    kind: str
    label: str
    total: str
    cells: list[str]
    status: list[str] = field(default_factory=list)
    over_budget: bool = False
    course_id: Optional[str] = None
    unit_id: Optional[str] = None


def header_row(plan: PlanData) -> list[str]:
    return ["Kurs / Einheit", "Summe"] + [t.name for t in plan.teachers]


def render_grid_rows(plan: PlanData, decimals: int = 1,
                     warn_below: float = 1.0) -> list[GridRow]:
    """Baut alle Zeilen: drei Summenzeilen, dann je Kurs eine Kopfzeile und seine Einheiten."""
    totals = grand_totals(plan)
    assigned = totals.assigned_by_teacher

    def fmt(value: Optional[float]) -> str:
        return format_hours(value, decimals)

    lefts = [remaining(t, assigned) for t in plan.teachers]

    rows = [
        GridRow("summary", "Kontingent", fmt(totals.total_allowance),
                [fmt(t.allowance) for t in plan.teachers]),
        GridRow("summary", "Zugewiesen", fmt(totals.total_assigned),
                [fmt(assigned[t.id]) for t in plan.teachers]),
        GridRow("summary", "Rest", fmt(totals.total_remaining),
                [fmt(left) for left in lefts],
                status=[remaining_status(left, warn_below) for left in lefts]),
    ]

    for course in plan.courses:
        label = course.name
        total = fmt(course_assigned(course))
        if course.target_hours is not None:
            total = f"{total} / {fmt(course.target_hours)}"
        rows.append(GridRow(
            "course", label, total, [""] * len(plan.teachers),
            over_budget=is_over_budget(course), course_id=course.id,
        ))
        for unit in course.units:
            cells = [
                fmt(unit.assignments[t.id]) if t.id in unit.assignments else ""
                for t in plan.teachers
            ]
            rows.append(GridRow(
                "unit", unit.name, fmt(unit_assigned(unit)), cells,
                course_id=course.id, unit_id=unit.id,
            ))
    return rows
