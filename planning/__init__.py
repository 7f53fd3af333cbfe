"""Planungskern: Mutations-API und Aggregation."""

from planning.aggregation import (
    PlanTotals,
    course_assigned,
    grand_totals,
    is_over_allocated,
    is_over_budget,
    remaining,
    teacher_totals,
    unit_assigned,
)

__all__ = [
    "PlanTotals",
    "course_assigned",
    "grand_totals",
    "is_over_allocated",
    "is_over_budget",
    "remaining",
    "teacher_totals",
    "unit_assigned",
]
