"""Plausibilitätsprüfung einer Planung (Über-/Unterdeckung, verwaiste Zuweisungen)."""

from pydantic import BaseModel

from models.plan import PlanData
from planning.aggregation import (
    HOURS_EPSILON,
    course_assigned,
    dangling_teacher_ids,
    is_over_allocated,
    is_over_budget,
    remaining,
    teacher_totals,
)


class PlanCheckReport(BaseModel):
    """Ergebnis der Planungsprüfung."""

    is_consistent: bool
    errors: list[str]      # Überplanung (Kontingent oder Kurs-Soll überschritten)
    warnings: list[str]    # Hinweise (knappes Kontingent, leere Einheiten, ...)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_consistent:
            status = "[bold green]✓ IM RAHMEN[/bold green]"
        else:
            status = "[bold red]✗ ÜBERPLANT[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Planungsprüfung", border_style="cyan"))


def check_plan(plan: PlanData, warn_remaining_below: float = 1.0) -> PlanCheckReport:
    """Prüft eine Planung.

    Prüfungen:
    1. Jede Lehrkraft: zugewiesene Stunden ≤ Kontingent
    2. Jeder Kurs mit Soll: zugewiesene Stunden ≤ Soll
    3. Zuweisungen an nicht (mehr) existierende Lehrkräfte
    4. Einheiten ohne Zuweisung, knappe Restkontingente
    """
    errors: list[str] = []
    warnings: list[str] = []
    totals = teacher_totals(plan.teachers, plan.courses)

    # ── 1. Kontingente ───────────────────────────────────────────────────
    for teacher in plan.teachers:
        left = remaining(teacher, totals)
        if is_over_allocated(left):
            errors.append(
                f"Lehrkraft {teacher.name}: {totals[teacher.id]:.1f}h zugewiesen "
                f"bei {teacher.allowance:.1f}h Kontingent ({-left:.1f}h zu viel)."
            )
        elif HOURS_EPSILON < left < warn_remaining_below:
            warnings.append(
                f"Lehrkraft {teacher.name}: nur noch {left:.1f}h frei."
            )

    # ── 2. Kurs-Soll ─────────────────────────────────────────────────────
    for course in plan.courses:
        if is_over_budget(course):
            assigned = course_assigned(course)
            errors.append(
                f"Kurs '{course.name}': {assigned:.1f}h zugewiesen, "
                f"Soll {course.target_hours:.1f}h überschritten."
            )

    # ── 3. Verwaiste Zuweisungen ─────────────────────────────────────────
    dangling = sorted(dangling_teacher_ids(plan))
    if dangling:
        warnings.append(
            f"Zuweisungen an unbekannte Lehrkräfte werden ignoriert: {', '.join(dangling)}"
        )

    # ── 4. Leere Einheiten ───────────────────────────────────────────────
    empty_units = [
        f"{c.name} / {u.name}" for c in plan.courses for u in c.units if not u.assignments
    ]
    if empty_units:
        warnings.append(
            f"{len(empty_units)} Einheit(en) ohne Zuweisung: "
            f"{', '.join(empty_units[:5])}{' ...' if len(empty_units) > 5 else ''}"
        )

    return PlanCheckReport(
        is_consistent=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
