"""Aggregation: abgeleitete Summen über einen PlanData-Snapshot.

Alle Funktionen sind seiteneffektfrei und rechnen bei jedem Aufruf von vorn.
Stunden sind Fließkommazahlen; Vergleiche auf Gleichheit über ``hours_equal``,
Anzeige mit einer Nachkommastelle über ``round_hours``.
"""

from dataclasses import dataclass
from typing import Optional

from models.course import Course, Unit
from models.plan import PlanData
from models.teacher import Teacher

HOURS_EPSILON = 1e-9


def round_hours(value: float, decimals: int = 1) -> float:
    """Rundet für die Anzeige (Standard: eine Nachkommastelle)."""
    return round(value, decimals)


def hours_equal(a: float, b: float, eps: float = HOURS_EPSILON) -> bool:
    return abs(a - b) <= eps


def unit_assigned(unit: Unit) -> float:
    """Summe aller Stunden einer Einheit."""
    return sum(unit.assignments.values())


def course_assigned(course: Course) -> float:
    """Summe aller Stunden über alle Einheiten eines Kurses."""
    return sum(unit_assigned(u) for u in course.units)


def is_over_budget(course: Course) -> bool:
    """True, wenn ein Soll gesetzt ist und mehr Stunden zugewiesen sind."""
    if course.target_hours is None:
        return False
    return course_assigned(course) > course.target_hours + HOURS_EPSILON


def teacher_totals(teachers: list[Teacher], courses: list[Course]) -> dict[str, float]:
    """Zugewiesene Stunden je Lehrkraft über alle Kurse und Einheiten.

    Lehrkräfte ohne Zuweisung erscheinen mit 0. IDs, die nur noch in
    Zuweisungen vorkommen (gelöschte Lehrkraft), werden ignoriert.
    """
    totals: dict[str, float] = {t.id: 0.0 for t in teachers}
    for course in courses:
        for unit in course.units:
            for teacher_id, hours in unit.assignments.items():
                if teacher_id in totals:
                    totals[teacher_id] += hours
    return totals


def remaining(teacher: Teacher, totals: dict[str, float]) -> float:
    """Restkontingent. Negativ = überplant; es wird nicht geklemmt."""
    return teacher.allowance - totals.get(teacher.id, 0.0)


def is_over_allocated(left: float) -> bool:
    """True bei negativem Rest; Rundungsreste wie 0.3 - (0.1 + 0.2) zählen nicht."""
    return left < -HOURS_EPSILON


def dangling_teacher_ids(plan: PlanData) -> set[str]:
    """Lehrkraft-IDs in Zuweisungen, zu denen es keine Lehrkraft mehr gibt."""
    known = {t.id for t in plan.teachers}
    return {
        tid
        for c in plan.courses for u in c.units for tid in u.assignments
        if tid not in known
    }


@dataclass
class PlanTotals:
    """Summenzeilen der Planungstabelle."""

    total_allowance: float
    total_assigned: float
    total_remaining: float
    total_target: Optional[float]   # None, wenn kein Kurs ein Soll hat
    over_allocated: list[str]       # Lehrkraft-IDs mit negativem Rest
    over_budget: list[str]          # Kurs-IDs über Soll
    assigned_by_teacher: dict[str, float]   # wie teacher_totals


def grand_totals(plan: PlanData) -> PlanTotals:
    totals = teacher_totals(plan.teachers, plan.courses)
    total_allowance = sum(t.allowance for t in plan.teachers)
    total_assigned = sum(totals.values())
    targets = [c.target_hours for c in plan.courses if c.target_hours is not None]
    return PlanTotals(
        total_allowance=total_allowance,
        total_assigned=total_assigned,
        total_remaining=total_allowance - total_assigned,
        total_target=sum(targets) if targets else None,
        over_allocated=[
            t.id for t in plan.teachers if is_over_allocated(remaining(t, totals))
        ],
        over_budget=[c.id for c in plan.courses if is_over_budget(c)],
        assigned_by_teacher=totals,
    )
