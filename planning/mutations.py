"""Mutations-API: reine Zustandsübergänge auf einem PlanData-Snapshot.

Jede Funktion nimmt den aktuellen Snapshot und liefert einen neuen zurück.
Der übergebene Snapshot (inkl. Listen und Assignment-Dicts) wird nie
verändert. Unbekannte IDs sind kein Fehler: die Operation ist dann ein No-Op,
denn die Oberfläche übergibt nur IDs, die sie selbst angezeigt hat.
"""

import logging
from typing import Callable, Optional

from models.course import Course, Unit
from models.plan import PlanData
from models.teacher import Teacher
from planning.ids import new_id

logger = logging.getLogger(__name__)


def set_or_clear(mapping: dict[str, float], key: str, value: float) -> dict[str, float]:
    """Setzt ``mapping[key] = value`` oder entfernt den Schlüssel bei value <= 0.

    Einzige Stelle, die die Regel "nicht-positive Stunden werden entfernt"
    durchsetzt. Gibt eine Kopie zurück.
    """
    updated = dict(mapping)
    if value > 0:
        updated[key] = value
    else:
        updated.pop(key, None)
    return updated


def _map_units(course: Course, fn: Callable[[Unit], Unit]) -> Course:
    return course.model_copy(update={"units": [fn(u) for u in course.units]})


def _map_course(plan: PlanData, course_id: str,
                fn: Callable[[Course], Course]) -> PlanData:
    if plan.find_course(course_id) is None:
        logger.debug(f"Kurs '{course_id}' nicht gefunden – ignoriert")
        return plan
    courses = [fn(c) if c.id == course_id else c for c in plan.courses]
    return plan.model_copy(update={"courses": courses})


# ─── Lehrkräfte ───

def add_teacher(plan: PlanData, name: str, allowance: float) -> PlanData:
    teacher = Teacher(id=new_id("t"), name=name, allowance=allowance)
    return plan.model_copy(update={"teachers": [*plan.teachers, teacher]})


def update_teacher(plan: PlanData, teacher_id: str, name: str,
                   allowance: float) -> PlanData:
    if plan.find_teacher(teacher_id) is None:
        logger.debug(f"Lehrkraft '{teacher_id}' nicht gefunden – ignoriert")
        return plan
    teachers = [
        Teacher(id=t.id, name=name, allowance=allowance) if t.id == teacher_id else t
        for t in plan.teachers
    ]
    return plan.model_copy(update={"teachers": teachers})


def delete_teacher(plan: PlanData, teacher_id: str) -> PlanData:
    """Entfernt die Lehrkraft und alle ihre Zuweisungen in allen Einheiten."""
    teachers = [t for t in plan.teachers if t.id != teacher_id]

    def strip(unit: Unit) -> Unit:
        if teacher_id not in unit.assignments:
            return unit
        return unit.model_copy(
            update={"assignments": set_or_clear(unit.assignments, teacher_id, 0)}
        )

    courses = [_map_units(c, strip) for c in plan.courses]
    return plan.model_copy(update={"teachers": teachers, "courses": courses})


# ─── Kurse ───

def add_course(plan: PlanData, name: str,
               target_hours: Optional[float] = None) -> PlanData:
    course = Course(id=new_id("c"), name=name, target_hours=target_hours, units=[])
    return plan.model_copy(update={"courses": [*plan.courses, course]})


def update_course(plan: PlanData, course_id: str, name: str,
                  target_hours: Optional[float]) -> PlanData:
    return _map_course(
        plan, course_id,
        lambda c: c.model_copy(update={"name": name, "target_hours": target_hours}),
    )


def delete_course(plan: PlanData, course_id: str) -> PlanData:
    """Entfernt den Kurs samt aller Einheiten und Zuweisungen."""
    courses = [c for c in plan.courses if c.id != course_id]
    return plan.model_copy(update={"courses": courses})


# ─── Einheiten ───

def add_unit(plan: PlanData, course_id: str, name: str) -> PlanData:
    unit = Unit(id=new_id("u"), name=name, assignments={})
    return _map_course(
        plan, course_id,
        lambda c: c.model_copy(update={"units": [*c.units, unit]}),
    )


def update_unit(plan: PlanData, course_id: str, unit_id: str, name: str) -> PlanData:
    return _map_course(
        plan, course_id,
        lambda c: _map_units(
            c, lambda u: u.model_copy(update={"name": name}) if u.id == unit_id else u
        ),
    )


def delete_unit(plan: PlanData, course_id: str, unit_id: str) -> PlanData:
    return _map_course(
        plan, course_id,
        lambda c: c.model_copy(update={"units": [u for u in c.units if u.id != unit_id]}),
    )


# ─── Zuweisungen ───

def update_assignment(plan: PlanData, course_id: str, unit_id: str,
                      teacher_id: str, hours: float) -> PlanData:
    """Setzt die Stunden einer Lehrkraft auf einer Einheit (<= 0 entfernt)."""
    course = plan.find_course(course_id)
    if course is None or course.find_unit(unit_id) is None:
        logger.debug(f"Einheit '{course_id}/{unit_id}' nicht gefunden – ignoriert")
        return plan

    def assign(unit: Unit) -> Unit:
        if unit.id != unit_id:
            return unit
        return unit.model_copy(
            update={"assignments": set_or_clear(unit.assignments, teacher_id, hours)}
        )

    return _map_course(plan, course_id, lambda c: _map_units(c, assign))


def clear_all_assignments(plan: PlanData) -> PlanData:
    """Leert die Zuweisungen aller Einheiten in allen Kursen."""
    courses = [
        _map_units(c, lambda u: u.model_copy(update={"assignments": {}}))
        for c in plan.courses
    ]
    return plan.model_copy(update={"courses": courses})
