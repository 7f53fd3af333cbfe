"""PlanData: Vollständiger Planungsstand eines Benutzers (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel

from models.course import Course
from models.teacher import Teacher


class PlanData(BaseModel):
    """Snapshot aller Lehrkräfte, Kurse und Einheiten eines Benutzers.

    Wird nie in-place verändert: jede Mutation (siehe ``planning.mutations``)
    liefert einen neuen Snapshot.
    """

    teachers: list[Teacher] = []
    courses: list[Course] = []

    def find_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def find_course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Planungsstand."""
        from planning.aggregation import grand_totals

        totals = grand_totals(self)
        total_units = sum(len(c.units) for c in self.courses)
        lines = [
            f"Lehrkräfte: {len(self.teachers)}",
            f"Kurse: {len(self.courses)} ({total_units} Einheiten)",
            f"Gesamtkontingent: {totals.total_allowance:.1f}h",
            f"Zugewiesen: {totals.total_assigned:.1f}h",
        ]
        return "\n".join(lines)

    # ─── Serialisierung ───

    def to_storage(self) -> dict:
        """Serialisiert den Snapshot im Speicherformat ({teachers, courses})."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
